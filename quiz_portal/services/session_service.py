"""
Quiz Session Service
Participant sessions: start, answer upsert, scoring on submission
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError, PyMongoError

from quiz_portal.core.config import settings
from quiz_portal.db.mongodb import SESSIONS_COLLECTION
from quiz_portal.models.quiz import Quiz
from quiz_portal.models.session import QuizSession
from quiz_portal.services.quiz_service import QuizNotFoundError, QuizService
from quiz_portal.services.scoring import calculate_score
from quiz_portal.utils.access_code import generate_access_code

logger = logging.getLogger(__name__)

MAX_ACCESS_CODE_ATTEMPTS = 3


class SessionNotFoundError(Exception):
    """Raised when no session matches an access code"""
    pass


class SessionStoreError(Exception):
    """Raised when a database operation on sessions fails"""
    pass


class SessionService:
    """
    Service for participant quiz sessions

    The access code is the only handle on a session. Nothing here checks
    that the quiz exists at start time, that an answered question belongs
    to the quiz, that the selected option is in range, or that the session
    is still open; those stay permissive.
    """

    COLLECTION_NAME = SESSIONS_COLLECTION

    def __init__(self, db: AsyncIOMotorDatabase, access_code_length: Optional[int] = None):
        """
        Initialize session service

        Args:
            db: MongoDB database instance
            access_code_length: Token length (defaults to settings.access_code_length)
        """
        self.db = db
        self.collection = db[self.COLLECTION_NAME]
        self.quiz_service = QuizService(db)
        self.access_code_length = access_code_length or settings.access_code_length

    async def start_session(self, username: str, quiz_id: str) -> str:
        """
        Create a new active session

        Args:
            username: Participant name (free text)
            quiz_id: Quiz to attempt (not checked for existence)

        Returns:
            The generated access code
        """
        for attempt in range(1, MAX_ACCESS_CODE_ATTEMPTS + 1):
            access_code = generate_access_code(self.access_code_length)
            now = datetime.now(timezone.utc)

            doc = {
                "username": username,
                "quizId": quiz_id,
                "accessCode": access_code,
                "responses": [],
                "score": None,
                "completed": False,
                "createdAt": now,
                "startTime": now,
                "updatedAt": now,
            }

            try:
                await self.collection.insert_one(doc)
            except DuplicateKeyError:
                logger.warning(f"⚠️ Access code collision (attempt {attempt}), regenerating")
                continue
            except PyMongoError as e:
                logger.error(f"❌ Failed to start session for quiz {quiz_id}: {e}")
                raise SessionStoreError(f"Failed to start quiz session: {e}") from e

            logger.info(f"🎬 Started session {access_code} for '{username}' on quiz {quiz_id}")
            return access_code

        raise SessionStoreError("Could not generate a unique access code")

    async def get_session(self, access_code: str) -> QuizSession:
        """Retrieve a session by access code"""
        try:
            doc = await self.collection.find_one({"accessCode": access_code})
        except PyMongoError as e:
            logger.error(f"❌ Failed to retrieve session {access_code}: {e}")
            raise SessionStoreError(f"Failed to retrieve session: {e}") from e

        if not doc:
            logger.warning(f"⚠️ Session not found: {access_code}")
            raise SessionNotFoundError("Quiz session not found")

        return QuizSession.from_document(doc)

    async def get_by_access_code(self, access_code: str) -> Tuple[Optional[Quiz], QuizSession]:
        """
        Load a session together with the quiz it answers

        Returns:
            (quiz, session); quiz is None when the session points at a quiz
            that no longer exists

        Raises:
            SessionNotFoundError: If the access code is unknown
        """
        session = await self.get_session(access_code)
        quiz = await self.quiz_service.find_quiz(session.quizId)
        return quiz, session

    async def submit_answer(
        self,
        access_code: str,
        question_id: str,
        selected_option: int
    ) -> None:
        """
        Record an answer, replacing any earlier answer to the same question

        Read-modify-write with no transaction; concurrent submissions for
        one session resolve last-write-wins.
        """
        session = await self.get_session(access_code)

        responses = [
            r.model_dump() for r in session.responses
            if r.questionId != question_id
        ]
        responses.append({"questionId": question_id, "selectedOption": selected_option})

        try:
            result = await self.collection.update_one(
                {"accessCode": access_code},
                {
                    "$set": {
                        "responses": responses,
                        "updatedAt": datetime.now(timezone.utc),
                    }
                }
            )
        except PyMongoError as e:
            logger.error(f"❌ Failed to store answer for session {access_code}: {e}")
            raise SessionStoreError(f"Failed to store answer: {e}") from e

        if result.matched_count == 0:
            raise SessionNotFoundError("Quiz session not found")

        logger.info(
            f"✅ Stored answer - Session: {access_code}, "
            f"Question: {question_id}, Option: {selected_option}"
        )

    async def submit_quiz(self, access_code: str) -> int:
        """
        Score the session and mark it completed

        Calling this again recomputes and overwrites the score from whatever
        answers are stored at that moment.

        Returns:
            Sum of marks for correctly answered questions

        Raises:
            SessionNotFoundError: If the access code is unknown
            QuizNotFoundError: If the session's quiz no longer exists
        """
        session = await self.get_session(access_code)
        quiz = await self.quiz_service.find_quiz(session.quizId)
        if quiz is None:
            logger.error(f"❌ Session {access_code} references missing quiz {session.quizId}")
            raise QuizNotFoundError(f"Quiz not found: {session.quizId}")

        score = calculate_score(quiz.questions, session.answers_by_question())
        now = datetime.now(timezone.utc)

        try:
            await self.collection.update_one(
                {"accessCode": access_code},
                {
                    "$set": {
                        "score": score,
                        "completed": True,
                        "endTime": now,
                        "updatedAt": now,
                    }
                }
            )
        except PyMongoError as e:
            logger.error(f"❌ Failed to complete session {access_code}: {e}")
            raise SessionStoreError(f"Failed to complete session: {e}") from e

        if session.completed:
            logger.info(f"🔁 Session {access_code} resubmitted, score recomputed")
        logger.info(f"🏁 Session {access_code} completed - Score: {score}")
        return score

    async def list_sessions_for_quiz(self, quiz_id: str) -> List[QuizSession]:
        """All sessions recorded against a quiz, newest first"""
        try:
            cursor = self.collection.find({"quizId": quiz_id}).sort("createdAt", -1)
            sessions = [QuizSession.from_document(doc) async for doc in cursor]
        except PyMongoError as e:
            logger.error(f"❌ Failed to retrieve sessions for quiz {quiz_id}: {e}")
            raise SessionStoreError(f"Failed to retrieve sessions: {e}") from e

        logger.info(f"📊 Retrieved {len(sessions)} sessions for quiz {quiz_id}")
        return sessions
