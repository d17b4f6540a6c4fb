"""
Shared FastAPI dependencies
"""
from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from quiz_portal.services.quiz_service import QuizService
from quiz_portal.services.session_service import SessionService


async def get_db() -> AsyncIOMotorDatabase:
    """Dependency to get MongoDB database instance"""
    from quiz_portal.db.mongodb import get_database
    return get_database()


def get_quiz_service(
    db: AsyncIOMotorDatabase = Depends(get_db)
) -> QuizService:
    """Dependency to get QuizService instance"""
    return QuizService(db=db)


def get_session_service(
    db: AsyncIOMotorDatabase = Depends(get_db)
) -> SessionService:
    """Dependency to get SessionService instance"""
    return SessionService(db=db)
