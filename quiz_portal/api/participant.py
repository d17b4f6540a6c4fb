"""
Participant API Routes
Start a session, fetch it by access code, answer questions, submit for a score
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Path

from quiz_portal.api.dependencies import get_session_service
from quiz_portal.models.session import (
    QuizAttemptView,
    StartQuizRequest,
    StartQuizResponse,
    SubmitAnswerRequest,
    SubmitAnswerResponse,
    SubmitQuizRequest,
    SubmitQuizResponse
)
from quiz_portal.services.quiz_service import QuizNotFoundError
from quiz_portal.services.scoring import time_remaining_seconds
from quiz_portal.services.session_service import SessionNotFoundError, SessionService

logger = logging.getLogger(__name__)

router = APIRouter()

GENERIC_ERROR = "Something went wrong!"


@router.post(
    "/start-quiz",
    response_model=StartQuizResponse,
    summary="Start a quiz session",
    description="""
    Create a session for a participant and return its access code.
    
    The quiz id is stored as given; it is not checked for existence.
    """
)
async def start_quiz(
    request: StartQuizRequest,
    service: SessionService = Depends(get_session_service)
) -> StartQuizResponse:
    try:
        access_code = await service.start_session(
            username=request.username,
            quiz_id=request.quizId
        )
        return StartQuizResponse(accessCode=access_code)
    
    except Exception as e:
        logger.error(f"Unexpected error starting session: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=GENERIC_ERROR)


@router.get(
    "/quiz/{access_code}",
    response_model=QuizAttemptView,
    responses={404: {"description": "Unknown access code"}},
    summary="Get quiz session"
)
async def get_quiz_session(
    access_code: str = Path(..., description="Session access code"),
    service: SessionService = Depends(get_session_service)
) -> QuizAttemptView:
    try:
        quiz, session = await service.get_by_access_code(access_code)
        
        remaining = None
        if quiz is not None and not session.completed:
            remaining = time_remaining_seconds(session.startTime, quiz.timeLimit)
        
        return QuizAttemptView(
            quiz=quiz,
            userResponse=session,
            timeRemainingSeconds=remaining
        )
    
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Quiz not found")
    
    except Exception as e:
        logger.error(f"Unexpected error loading session {access_code}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=GENERIC_ERROR)


@router.post(
    "/submit-answer",
    response_model=SubmitAnswerResponse,
    responses={404: {"description": "Unknown access code"}},
    summary="Submit an answer"
)
async def submit_answer(
    request: SubmitAnswerRequest,
    service: SessionService = Depends(get_session_service)
) -> SubmitAnswerResponse:
    """Store one answer; a later answer to the same question replaces it"""
    try:
        await service.submit_answer(
            access_code=request.accessCode,
            question_id=request.questionId,
            selected_option=request.selectedOption
        )
        return SubmitAnswerResponse(success=True)
    
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    
    except Exception as e:
        logger.error(f"Unexpected error storing answer: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=GENERIC_ERROR)


@router.post(
    "/submit-quiz",
    response_model=SubmitQuizResponse,
    responses={404: {"description": "Unknown access code or deleted quiz"}},
    summary="Submit the quiz for scoring"
)
async def submit_quiz(
    request: SubmitQuizRequest,
    service: SessionService = Depends(get_session_service)
) -> SubmitQuizResponse:
    try:
        score = await service.submit_quiz(request.accessCode)
        return SubmitQuizResponse(score=score)
    
    except SessionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    
    except QuizNotFoundError:
        raise HTTPException(status_code=404, detail="Quiz not found")
    
    except Exception as e:
        logger.error(f"Unexpected error submitting quiz: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=GENERIC_ERROR)
