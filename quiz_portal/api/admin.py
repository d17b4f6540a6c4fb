"""
Admin API Routes
Quiz authoring, listing with statistics, and per-quiz responses
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Path, status

from quiz_portal.api.dependencies import get_quiz_service, get_session_service
from quiz_portal.models.quiz import DeleteQuizResponse, Quiz, QuizPayload, QuizSummary
from quiz_portal.models.session import QuizResponsesView
from quiz_portal.services.quiz_service import (
    QuizNotFoundError,
    QuizService,
    QuizValidationError
)
from quiz_portal.services.scoring import total_marks
from quiz_portal.services.session_service import SessionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin/quizzes")

GENERIC_ERROR = "Something went wrong!"


@router.get(
    "",
    response_model=List[QuizSummary],
    summary="List Quizzes",
    description="All quizzes, newest first, with completed-attempt count and average score"
)
async def list_quizzes(
    service: QuizService = Depends(get_quiz_service)
) -> List[QuizSummary]:
    try:
        return await service.list_quizzes()
    except Exception as e:
        logger.error(f"Unexpected error listing quizzes: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=GENERIC_ERROR)


@router.post(
    "",
    response_model=Quiz,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid marks or malformed question"},
        500: {"description": "Internal server error"}
    },
    summary="Create Quiz"
)
async def create_quiz(
    request: QuizPayload,
    service: QuizService = Depends(get_quiz_service)
) -> Quiz:
    """
    Create a quiz

    Every question's marks must be a whole number from 1 to 10,
    otherwise nothing is stored and 400 is returned.
    """
    try:
        return await service.create_quiz(
            title=request.title,
            questions=request.questions,
            time_limit=request.timeLimit
        )
    
    except QuizValidationError as e:
        logger.warning(f"⚠️ Rejected quiz '{request.title}': {e}")
        raise HTTPException(status_code=400, detail=str(e))
    
    except Exception as e:
        logger.error(f"Unexpected error creating quiz: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=GENERIC_ERROR)


@router.get(
    "/{quiz_id}",
    response_model=Quiz,
    summary="Get Quiz"
)
async def get_quiz(
    quiz_id: str = Path(..., description="Quiz ID"),
    service: QuizService = Depends(get_quiz_service)
) -> Quiz:
    try:
        return await service.get_quiz(quiz_id)
    
    except QuizNotFoundError:
        raise HTTPException(status_code=404, detail="Quiz not found")
    
    except Exception as e:
        logger.error(f"Unexpected error retrieving quiz {quiz_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=GENERIC_ERROR)


@router.put(
    "/{quiz_id}",
    response_model=Quiz,
    responses={
        400: {"description": "Invalid marks or malformed question"},
        404: {"description": "Quiz not found"}
    },
    summary="Update Quiz"
)
async def update_quiz(
    request: QuizPayload,
    quiz_id: str = Path(..., description="Quiz ID"),
    service: QuizService = Depends(get_quiz_service)
) -> Quiz:
    try:
        return await service.update_quiz(
            quiz_id,
            title=request.title,
            questions=request.questions,
            time_limit=request.timeLimit
        )
    
    except QuizValidationError as e:
        logger.warning(f"⚠️ Rejected update of quiz {quiz_id}: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    
    except QuizNotFoundError:
        raise HTTPException(status_code=404, detail="Quiz not found")
    
    except Exception as e:
        logger.error(f"Unexpected error updating quiz {quiz_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=GENERIC_ERROR)


@router.delete(
    "/{quiz_id}",
    response_model=DeleteQuizResponse,
    responses={404: {"description": "Quiz not found"}},
    summary="Delete Quiz",
    description="Delete a quiz together with every session recorded against it"
)
async def delete_quiz(
    quiz_id: str = Path(..., description="Quiz ID"),
    service: QuizService = Depends(get_quiz_service)
) -> DeleteQuizResponse:
    try:
        deleted_sessions = await service.delete_quiz(quiz_id)
        return DeleteQuizResponse(
            message="Quiz deleted successfully",
            deletedSessions=deleted_sessions
        )
    
    except QuizNotFoundError:
        raise HTTPException(status_code=404, detail="Quiz not found")
    
    except Exception as e:
        logger.error(f"Unexpected error deleting quiz {quiz_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=GENERIC_ERROR)


@router.get(
    "/{quiz_id}/responses",
    response_model=QuizResponsesView,
    summary="Get Quiz Responses",
    description="Every participant session for a quiz, completed or in progress"
)
async def get_quiz_responses(
    quiz_id: str = Path(..., description="Quiz ID"),
    quiz_service: QuizService = Depends(get_quiz_service),
    session_service: SessionService = Depends(get_session_service)
) -> QuizResponsesView:
    try:
        quiz = await quiz_service.get_quiz(quiz_id)
        sessions = await session_service.list_sessions_for_quiz(quiz.id)
        
        return QuizResponsesView(
            quizId=quiz.id,
            totalMarks=total_marks(quiz.questions),
            responses=sessions
        )
    
    except QuizNotFoundError:
        raise HTTPException(status_code=404, detail="Quiz not found")
    
    except Exception as e:
        logger.error(f"Unexpected error retrieving responses for quiz {quiz_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=GENERIC_ERROR)
