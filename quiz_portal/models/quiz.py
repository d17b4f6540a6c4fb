"""
Quiz Models
Pydantic models for quiz definitions, admin payloads and list statistics
FILE: quiz_portal/models/quiz.py
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

OPTIONS_PER_QUESTION = 4


class QuestionPayload(BaseModel):
    """
    Question as submitted by the admin editor

    ``marks`` is taken as sent and checked by QuizService, not by the schema.
    """
    id: Optional[str] = Field(
        default=None,
        description="Existing question id (kept on edit so in-progress answers still match)"
    )
    text: str = Field(..., description="Question prompt")
    options: List[str] = Field(
        ...,
        min_length=OPTIONS_PER_QUESTION,
        max_length=OPTIONS_PER_QUESTION,
        description="Exactly 4 answer options"
    )
    correctAnswer: int = Field(..., ge=0, le=OPTIONS_PER_QUESTION - 1, description="Index of the correct option")
    marks: Any = Field(..., description="Whole number of marks between 1 and 10")


class QuizPayload(BaseModel):
    """Request body for creating or replacing a quiz"""
    title: str = Field(..., description="Quiz title")
    questions: List[QuestionPayload] = Field(..., description="Ordered questions")
    timeLimit: Optional[int] = Field(default=None, ge=1, description="Time limit in minutes")
    
    class Config:
        json_schema_extra = {
            "example": {
                "title": "Python Basics",
                "timeLimit": 30,
                "questions": [
                    {
                        "text": "Which keyword defines a function?",
                        "options": ["func", "def", "lambda", "fn"],
                        "correctAnswer": 1,
                        "marks": 2
                    }
                ]
            }
        }


class Question(BaseModel):
    """Stored question, including its correct answer"""
    id: str
    text: str
    options: List[str]
    correctAnswer: int
    marks: int
    
    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Question":
        return cls(
            id=str(doc["_id"]),
            text=doc.get("text", ""),
            options=doc.get("options", []),
            correctAnswer=doc["correctAnswer"],
            marks=doc["marks"],
        )


class Quiz(BaseModel):
    """Quiz definition as exposed by the API"""
    id: str
    title: str
    questions: List[Question] = Field(default_factory=list)
    timeLimit: Optional[int] = None
    createdAt: datetime
    updatedAt: datetime
    
    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Quiz":
        return cls(
            id=str(doc["_id"]),
            title=doc.get("title", ""),
            questions=[Question.from_document(q) for q in doc.get("questions", [])],
            timeLimit=doc.get("timeLimit"),
            createdAt=doc["createdAt"],
            updatedAt=doc.get("updatedAt", doc["createdAt"]),
        )


class QuizSummary(Quiz):
    """Quiz annotated with statistics over its completed sessions"""
    attempts: int = Field(default=0, ge=0, description="Number of completed sessions")
    averageScore: float = Field(default=0, ge=0, description="Mean score, 2 decimal places")
    
    class Config:
        json_schema_extra = {
            "example": {
                "id": "665f1c2ab1d4e2a3c0f1a001",
                "title": "Python Basics",
                "questions": [],
                "timeLimit": 30,
                "createdAt": "2025-01-15T10:00:00Z",
                "updatedAt": "2025-01-15T10:00:00Z",
                "attempts": 2,
                "averageScore": 5.0
            }
        }


class DeleteQuizResponse(BaseModel):
    message: str
    deletedSessions: int = Field(..., ge=0)
