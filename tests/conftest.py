import pytest
from httpx import AsyncClient, ASGITransport
from mongomock_motor import AsyncMongoMockClient

from quiz_portal.main import app
from quiz_portal.api.dependencies import get_db
from quiz_portal.db.mongodb import ensure_indexes
from quiz_portal.models.quiz import QuestionPayload
from quiz_portal.services.quiz_service import QuizService
from quiz_portal.services.session_service import SessionService


@pytest.fixture
async def db():
    """Fresh in-memory MongoDB database per test"""
    database = AsyncMongoMockClient()["quiz_portal_test"]
    await ensure_indexes(database)
    yield database


@pytest.fixture
def quiz_service(db):
    return QuizService(db)


@pytest.fixture
def session_service(db):
    return SessionService(db)


@pytest.fixture
async def client(db):
    """Test client wired to the in-memory database"""
    app.dependency_overrides[get_db] = lambda: db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def test_quiz_data():
    """Two-question quiz: Q1 worth 5 (correct option 1), Q2 worth 3 (correct option 0)"""
    return {
        "title": "General Knowledge",
        "timeLimit": 10,
        "questions": [
            {
                "text": "What is 2+2?",
                "options": ["3", "4", "5", "6"],
                "correctAnswer": 1,
                "marks": 5
            },
            {
                "text": "What is the capital of France?",
                "options": ["Paris", "Berlin", "London", "Madrid"],
                "correctAnswer": 0,
                "marks": 3
            }
        ]
    }


@pytest.fixture
async def created_quiz(quiz_service, test_quiz_data):
    """The sample quiz stored through the service"""
    return await quiz_service.create_quiz(
        title=test_quiz_data["title"],
        questions=[QuestionPayload(**q) for q in test_quiz_data["questions"]],
        time_limit=test_quiz_data["timeLimit"]
    )
