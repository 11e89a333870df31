"""
Quiz browsing, start and submission API endpoints
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
import logging

from app.api.deps import get_current_user_id
from app.database import get_db
from app.schemas.quiz import (
    AttemptDetail,
    AttemptSummary,
    QuizDetail,
    QuizStartResponse,
    QuizSubmission,
    QuizSubmissionResult,
    QuizSummary,
)
from app.services.quiz_service import quiz_service


router = APIRouter(prefix="/api/quizzes", tags=["quizzes"])
logger = logging.getLogger(__name__)


@router.get("/", response_model=List[QuizSummary])
async def list_quizzes(
    category: Optional[str] = Query(None, description="Category, or 'all'"),
    search: Optional[str] = Query(None, max_length=100, description="Title/description text"),
    db: Session = Depends(get_db),
):
    """List active quizzes, newest first"""
    return quiz_service.list_quizzes(db, category=category, search=search)


@router.get("/categories", response_model=List[str])
async def list_categories(db: Session = Depends(get_db)):
    """Distinct categories of active quizzes"""
    return quiz_service.list_categories(db)


@router.get("/attempts", response_model=List[AttemptSummary])
async def list_my_attempts(
    user_id: UUID = Depends(get_current_user_id), db: Session = Depends(get_db)
):
    """
    Caller's most recent attempts

    Read directly from the attempts table, newest first.
    """
    return quiz_service.get_user_attempts(db, user_id)


@router.get("/attempts/{attempt_id}", response_model=AttemptDetail)
async def get_my_attempt(
    attempt_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """One of the caller's attempts with the answers that were stored"""
    return quiz_service.get_attempt(db, attempt_id, user_id)


@router.get("/{quiz_id}", response_model=QuizDetail)
async def get_quiz(quiz_id: UUID, db: Session = Depends(get_db)):
    """Quiz with full question data; inactive quizzes are not found"""
    return quiz_service.get_quiz_detail(db, quiz_id)


@router.get("/{quiz_id}/start", response_model=QuizStartResponse)
async def start_quiz(
    quiz_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Start a quiz

    Returns the questions without correct answers or explanations,
    plus the total question count and time limit.
    """
    logger.info(f"User {user_id} started quiz {quiz_id}")
    return quiz_service.start_quiz(db, quiz_id)


@router.post("/{quiz_id}/submit", response_model=QuizSubmissionResult)
async def submit_quiz(
    quiz_id: UUID,
    submission: QuizSubmission,
    user_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """
    Submit and grade a quiz

    Grading strategy:
    - answers[i] is compared with the correct option of question i
    - Missing, null or out-of-range answers are unanswered and never correct
    - Extra answers are ignored

    Returns:
    - Score, total questions and percentage
    - Per-question breakdown with correct answers and explanations
    - Id of the stored attempt
    """
    return quiz_service.submit_quiz(
        db,
        quiz_id=quiz_id,
        user_id=user_id,
        answers=submission.answers,
        time_taken_seconds=submission.time_taken_seconds,
    )
