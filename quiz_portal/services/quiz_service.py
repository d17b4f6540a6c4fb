"""
Quiz Service
Quiz definitions: authoring, lookup, listing with statistics and cascading delete
FILE: quiz_portal/services/quiz_service.py
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from quiz_portal.db.mongodb import QUIZZES_COLLECTION, SESSIONS_COLLECTION
from quiz_portal.models.quiz import QuestionPayload, Quiz, QuizSummary
from quiz_portal.services.scoring import summarize_scores

logger = logging.getLogger(__name__)

MIN_MARKS = 1
MAX_MARKS = 10
INVALID_MARKS_MESSAGE = "Marks must be whole numbers between 1 and 10"


# ==================== CUSTOM EXCEPTIONS ====================

class QuizNotFoundError(Exception):
    """Raised when quiz is not found in database"""
    pass


class QuizValidationError(Exception):
    """Raised when a quiz definition fails validation"""
    pass


class QuizStoreError(Exception):
    """Raised when a database operation on quizzes fails"""
    pass


# ==================== VALIDATION ====================

def normalize_marks(marks: Any) -> int:
    """
    Coerce a marks value to an int in [1, 10]

    Integral floats (``5.0``) are accepted; booleans, fractions and
    out-of-range values raise QuizValidationError.
    """
    if isinstance(marks, bool):
        raise QuizValidationError(INVALID_MARKS_MESSAGE)
    if isinstance(marks, float):
        if not marks.is_integer():
            raise QuizValidationError(INVALID_MARKS_MESSAGE)
        marks = int(marks)
    if not isinstance(marks, int) or not MIN_MARKS <= marks <= MAX_MARKS:
        raise QuizValidationError(INVALID_MARKS_MESSAGE)
    return marks


def build_question_documents(questions: List[QuestionPayload]) -> List[Dict[str, Any]]:
    """
    Validate every question before anything is written and build the
    embedded question documents

    A well-formed id supplied by the editor is kept so answers already
    stored against it keep matching.
    """
    documents = []
    seen_ids = set()

    for question in questions:
        marks = normalize_marks(question.marks)

        if question.id and ObjectId.is_valid(question.id) and question.id not in seen_ids:
            question_id = ObjectId(question.id)
        else:
            question_id = ObjectId()
        seen_ids.add(str(question_id))

        documents.append({
            "_id": question_id,
            "text": question.text,
            "options": list(question.options),
            "correctAnswer": question.correctAnswer,
            "marks": marks,
        })

    return documents


def parse_quiz_id(quiz_id: str) -> Optional[ObjectId]:
    """Return the ObjectId for a quiz id, or None if it is malformed"""
    if not quiz_id or not ObjectId.is_valid(quiz_id):
        return None
    return ObjectId(quiz_id)


# ==================== QUIZ SERVICE ====================

class QuizService:
    """Service for creating, reading, updating and deleting quizzes"""

    COLLECTION_NAME = QUIZZES_COLLECTION

    def __init__(self, db: AsyncIOMotorDatabase):
        """
        Initialize quiz service

        Args:
            db: MongoDB database instance
        """
        self.db = db
        self.collection = db[self.COLLECTION_NAME]
        self.sessions = db[SESSIONS_COLLECTION]

    async def create_quiz(
        self,
        title: str,
        questions: List[QuestionPayload],
        time_limit: Optional[int] = None
    ) -> Quiz:
        """
        Create a new quiz

        Args:
            title: Quiz title
            questions: Ordered question payloads
            time_limit: Optional time limit in minutes

        Returns:
            Created Quiz

        Raises:
            QuizValidationError: If any question has invalid marks (nothing is written)
            QuizStoreError: If the insert fails
        """
        question_docs = build_question_documents(questions)
        now = datetime.now(timezone.utc)

        doc = {
            "title": title,
            "questions": question_docs,
            "timeLimit": time_limit,
            "createdAt": now,
            "updatedAt": now,
        }

        try:
            result = await self.collection.insert_one(doc)
        except PyMongoError as e:
            logger.error(f"❌ Failed to create quiz '{title}': {e}")
            raise QuizStoreError(f"Failed to create quiz: {e}") from e

        doc["_id"] = result.inserted_id
        logger.info(
            f"✅ Created quiz {result.inserted_id} '{title}' "
            f"({len(question_docs)} questions)"
        )
        return Quiz.from_document(doc)

    async def find_quiz(self, quiz_id: str) -> Optional[Quiz]:
        """Retrieve a quiz by ID, or None when it does not exist"""
        object_id = parse_quiz_id(quiz_id)
        if object_id is None:
            logger.warning(f"⚠️ Malformed quiz id: {quiz_id!r}")
            return None

        try:
            doc = await self.collection.find_one({"_id": object_id})
        except PyMongoError as e:
            logger.error(f"❌ Failed to retrieve quiz {quiz_id}: {e}")
            raise QuizStoreError(f"Failed to retrieve quiz: {e}") from e

        if not doc:
            logger.warning(f"⚠️ Quiz not found: {quiz_id}")
            return None

        return Quiz.from_document(doc)

    async def get_quiz(self, quiz_id: str) -> Quiz:
        """Retrieve a quiz by ID, raising QuizNotFoundError when missing"""
        quiz = await self.find_quiz(quiz_id)
        if quiz is None:
            raise QuizNotFoundError(f"Quiz not found: {quiz_id}")
        return quiz

    async def list_quizzes(self) -> List[QuizSummary]:
        """
        List all quizzes, newest first, with attempt statistics

        attempts counts completed sessions only; averageScore is their mean
        score rounded to 2 decimals (0 when there are none).
        """
        summaries = []

        try:
            cursor = self.collection.find().sort("createdAt", -1)
            async for doc in cursor:
                quiz = Quiz.from_document(doc)

                score_cursor = self.sessions.find(
                    {"quizId": quiz.id, "completed": True},
                    {"score": 1}
                )
                scores = [s.get("score") async for s in score_cursor]
                attempts, average = summarize_scores(scores)

                summaries.append(
                    QuizSummary(**quiz.model_dump(), attempts=attempts, averageScore=average)
                )
        except PyMongoError as e:
            logger.error(f"❌ Failed to list quizzes: {e}")
            raise QuizStoreError(f"Failed to list quizzes: {e}") from e

        logger.info(f"📊 Retrieved {len(summaries)} quizzes")
        return summaries

    async def update_quiz(
        self,
        quiz_id: str,
        title: str,
        questions: List[QuestionPayload],
        time_limit: Optional[int] = None
    ) -> Quiz:
        """
        Replace the editable fields of a quiz and restamp updatedAt

        Raises:
            QuizValidationError: If any question has invalid marks (nothing is written)
            QuizNotFoundError: If the quiz does not exist
        """
        question_docs = build_question_documents(questions)

        object_id = parse_quiz_id(quiz_id)
        if object_id is None:
            raise QuizNotFoundError(f"Quiz not found: {quiz_id}")

        try:
            doc = await self.collection.find_one_and_update(
                {"_id": object_id},
                {
                    "$set": {
                        "title": title,
                        "questions": question_docs,
                        "timeLimit": time_limit,
                        "updatedAt": datetime.now(timezone.utc),
                    }
                },
                return_document=ReturnDocument.AFTER
            )
        except PyMongoError as e:
            logger.error(f"❌ Failed to update quiz {quiz_id}: {e}")
            raise QuizStoreError(f"Failed to update quiz: {e}") from e

        if not doc:
            logger.warning(f"⚠️ Quiz not found for update: {quiz_id}")
            raise QuizNotFoundError(f"Quiz not found: {quiz_id}")

        logger.info(f"✅ Updated quiz {quiz_id}")
        return Quiz.from_document(doc)

    async def delete_quiz(self, quiz_id: str) -> int:
        """
        Delete a quiz and every session that references it

        Returns:
            Number of sessions deleted along with the quiz

        Raises:
            QuizNotFoundError: If the quiz does not exist
        """
        object_id = parse_quiz_id(quiz_id)
        if object_id is None:
            raise QuizNotFoundError(f"Quiz not found: {quiz_id}")

        try:
            result = await self.collection.delete_one({"_id": object_id})
            if result.deleted_count == 0:
                logger.warning(f"⚠️ Quiz not found for deletion: {quiz_id}")
                raise QuizNotFoundError(f"Quiz not found: {quiz_id}")

            sessions_result = await self.sessions.delete_many({"quizId": quiz_id})
        except PyMongoError as e:
            logger.error(f"❌ Failed to delete quiz {quiz_id}: {e}")
            raise QuizStoreError(f"Failed to delete quiz: {e}") from e

        logger.info(
            f"🗑️ Deleted quiz {quiz_id} and "
            f"{sessions_result.deleted_count} sessions"
        )
        return sessions_result.deleted_count
