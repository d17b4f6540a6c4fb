import pytest
from bson import ObjectId

from quiz_portal.models.quiz import QuestionPayload
from quiz_portal.services.quiz_service import QuizNotFoundError, QuizValidationError
from quiz_portal.services.session_service import SessionNotFoundError


def payloads(questions):
    return [QuestionPayload(**q) for q in questions]


class TestCreateQuiz:

    @pytest.mark.asyncio
    async def test_create_assigns_ids(self, created_quiz, test_quiz_data):
        assert ObjectId.is_valid(created_quiz.id)
        assert created_quiz.title == test_quiz_data["title"]
        assert created_quiz.timeLimit == 10
        assert [q.marks for q in created_quiz.questions] == [5, 3]
        assert len({q.id for q in created_quiz.questions}) == 2

    @pytest.mark.asyncio
    async def test_invalid_marks_write_nothing(self, quiz_service, db, test_quiz_data):
        questions = test_quiz_data["questions"]
        questions[1]["marks"] = 11

        with pytest.raises(QuizValidationError):
            await quiz_service.create_quiz("Bad", payloads(questions))

        assert await db["quizzes"].count_documents({}) == 0

    @pytest.mark.asyncio
    async def test_get_round_trips_stored_quiz(self, quiz_service, created_quiz):
        fetched = await quiz_service.get_quiz(created_quiz.id)
        assert fetched.id == created_quiz.id
        assert [q.id for q in fetched.questions] == [q.id for q in created_quiz.questions]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("quiz_id", [str(ObjectId()), "not-an-id"])
    async def test_get_unknown_quiz(self, quiz_service, quiz_id):
        with pytest.raises(QuizNotFoundError):
            await quiz_service.get_quiz(quiz_id)
        assert await quiz_service.find_quiz(quiz_id) is None


class TestListQuizzes:

    @pytest.mark.asyncio
    async def test_quiz_without_attempts(self, quiz_service, created_quiz):
        summaries = await quiz_service.list_quizzes()
        assert len(summaries) == 1
        assert summaries[0].id == created_quiz.id
        assert summaries[0].attempts == 0
        assert summaries[0].averageScore == 0

    @pytest.mark.asyncio
    async def test_average_over_completed_sessions_only(self, quiz_service, db, created_quiz):
        sessions = db["user_responses"]
        await sessions.insert_many([
            {"quizId": created_quiz.id, "accessCode": "a1", "completed": True, "score": 4},
            {"quizId": created_quiz.id, "accessCode": "a2", "completed": True, "score": 6},
            {"quizId": created_quiz.id, "accessCode": "a3", "completed": False, "score": None},
            {"quizId": str(ObjectId()), "accessCode": "a4", "completed": True, "score": 8},
        ])

        summary = (await quiz_service.list_quizzes())[0]
        assert summary.attempts == 2
        assert summary.averageScore == 5.0

    @pytest.mark.asyncio
    async def test_lists_every_quiz(self, quiz_service, test_quiz_data):
        for title in ("First", "Second"):
            await quiz_service.create_quiz(title, payloads(test_quiz_data["questions"]))

        titles = {q.title for q in await quiz_service.list_quizzes()}
        assert titles == {"First", "Second"}


class TestUpdateQuiz:

    @pytest.mark.asyncio
    async def test_update_replaces_fields_and_stamps_time(self, quiz_service, created_quiz):
        questions = [
            {
                "id": created_quiz.questions[0].id,
                "text": "What is 3+3?",
                "options": ["6", "7", "8", "9"],
                "correctAnswer": 0,
                "marks": 2
            }
        ]

        updated = await quiz_service.update_quiz(
            created_quiz.id, "Renamed", payloads(questions), time_limit=None
        )

        assert updated.title == "Renamed"
        assert updated.timeLimit is None
        assert len(updated.questions) == 1
        assert updated.questions[0].id == created_quiz.questions[0].id
        assert updated.questions[0].marks == 2
        assert updated.updatedAt >= updated.createdAt

    @pytest.mark.asyncio
    async def test_invalid_marks_leave_quiz_untouched(self, quiz_service, created_quiz, test_quiz_data):
        questions = test_quiz_data["questions"]
        questions[0]["marks"] = 0.5

        with pytest.raises(QuizValidationError):
            await quiz_service.update_quiz(created_quiz.id, "Changed", payloads(questions))

        stored = await quiz_service.get_quiz(created_quiz.id)
        assert stored.title == created_quiz.title
        assert [q.marks for q in stored.questions] == [5, 3]

    @pytest.mark.asyncio
    async def test_update_unknown_quiz(self, quiz_service, test_quiz_data):
        with pytest.raises(QuizNotFoundError):
            await quiz_service.update_quiz(
                str(ObjectId()), "Ghost", payloads(test_quiz_data["questions"])
            )


class TestDeleteQuiz:

    @pytest.mark.asyncio
    async def test_delete_cascades_to_sessions(self, quiz_service, session_service, created_quiz):
        codes = [
            await session_service.start_session("ada", created_quiz.id),
            await session_service.start_session("bob", created_quiz.id),
        ]
        other_code = await session_service.start_session("eve", str(ObjectId()))

        deleted = await quiz_service.delete_quiz(created_quiz.id)

        assert deleted == 2
        assert await quiz_service.find_quiz(created_quiz.id) is None
        for code in codes:
            with pytest.raises(SessionNotFoundError):
                await session_service.get_session(code)
        assert (await session_service.get_session(other_code)).username == "eve"

    @pytest.mark.asyncio
    async def test_delete_unknown_quiz(self, quiz_service):
        with pytest.raises(QuizNotFoundError):
            await quiz_service.delete_quiz(str(ObjectId()))
