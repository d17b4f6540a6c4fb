"""
Quiz Session Models
A session is one participant's attempt at one quiz, addressed by its access code
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from quiz_portal.models.quiz import Quiz


class Answer(BaseModel):
    """Stored answer for a single question"""
    questionId: str = Field(..., description="Question ID reference")
    selectedOption: int = Field(..., description="Index of the chosen option")


class QuizSession(BaseModel):
    """Participant session with answers and (after submission) the score"""
    id: str
    username: str
    quizId: str
    accessCode: str
    responses: List[Answer] = Field(default_factory=list)
    score: Optional[int] = Field(default=None, ge=0, description="Set only once completed")
    completed: bool = False
    createdAt: datetime
    startTime: datetime
    endTime: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
    
    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "QuizSession":
        return cls(
            id=str(doc["_id"]),
            username=doc.get("username") or "",
            quizId=str(doc.get("quizId") or ""),
            accessCode=doc["accessCode"],
            responses=[Answer(**r) for r in doc.get("responses", [])],
            score=doc.get("score"),
            completed=doc.get("completed", False),
            createdAt=doc["createdAt"],
            startTime=doc.get("startTime", doc["createdAt"]),
            endTime=doc.get("endTime"),
            updatedAt=doc.get("updatedAt"),
        )
    
    def answers_by_question(self) -> Dict[str, int]:
        return {r.questionId: r.selectedOption for r in self.responses}


# ============================================================================
# REQUEST / RESPONSE MODELS
# ============================================================================

class StartQuizRequest(BaseModel):
    """Request model for starting a new quiz session"""
    username: str = Field(..., description="Participant display name (free text)")
    quizId: str = Field(..., description="ID of the quiz to attempt")
    
    class Config:
        json_schema_extra = {
            "example": {
                "username": "ada",
                "quizId": "665f1c2ab1d4e2a3c0f1a001"
            }
        }


class StartQuizResponse(BaseModel):
    accessCode: str = Field(..., description="Capability token for this session")


class SubmitAnswerRequest(BaseModel):
    """Request model for answer submission"""
    accessCode: str = Field(..., description="Session access code")
    questionId: str = Field(..., description="Question ID being answered")
    selectedOption: int = Field(..., description="Index of the chosen option")


class SubmitAnswerResponse(BaseModel):
    success: bool = True


class SubmitQuizRequest(BaseModel):
    """Request model for completing a quiz session"""
    accessCode: str = Field(..., description="Session access code")


class SubmitQuizResponse(BaseModel):
    score: int = Field(..., ge=0, description="Sum of marks for correctly answered questions")


class QuizAttemptView(BaseModel):
    """Everything a participant needs to resume or review an attempt"""
    quiz: Optional[Quiz] = Field(..., description="Null when the quiz no longer exists")
    userResponse: QuizSession
    timeRemainingSeconds: Optional[int] = Field(
        default=None,
        description="Seconds left on the time limit (informational, not enforced)"
    )


class QuizResponsesView(BaseModel):
    """All sessions recorded against one quiz"""
    quizId: str
    totalMarks: int
    responses: List[QuizSession]
