"""
Administration API endpoints - question bank, quizzes, dashboard
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
import logging

from app.api.deps import get_current_user_id
from app.database import get_db
from app.schemas.admin import DashboardStats, MessageResponse, QuestionPage
from app.schemas.question import (
    BulkUploadRequest, BulkUploadResponse, QuestionCreate,
    QuestionResponse, QuestionUpdate
)
from app.schemas.quiz import AttemptSummary, QuizCreate, QuizDetail, QuizSummary, QuizUpdate
from app.services.admin_service import admin_service

router = APIRouter(prefix="/api/admin", tags=["admin"])
logger = logging.getLogger(__name__)


@router.get("/dashboard", response_model=DashboardStats)
async def get_dashboard(db: Session = Depends(get_db)):
    """
    Dashboard statistics

    Returns:
    - Quiz, question and attempt totals
    - Number of distinct users who attempted a quiz
    - Ten most recent attempts
    - Quiz counts per category
    """
    return admin_service.get_dashboard_stats(db)


# Questions

@router.get("/questions", response_model=QuestionPage)
async def list_questions(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    category: Optional[str] = None,
    search: Optional[str] = Query(None, max_length=100),
    db: Session = Depends(get_db)
):
    return admin_service.list_questions(
        db, page=page, limit=limit, category=category, search=search
    )


@router.post("/questions", response_model=QuestionResponse, status_code=201)
async def create_question(
    payload: QuestionCreate,
    admin_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    return admin_service.create_question(db, payload, admin_id)


@router.post("/questions/bulk", response_model=BulkUploadResponse, status_code=201)
async def bulk_upload_questions(
    payload: BulkUploadRequest,
    admin_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Import questions from decoded spreadsheet rows

    Rows without a question or any of the four options are skipped.
    Missing optional cells fall back to defaults.
    """
    created, skipped = admin_service.bulk_create_questions(db, payload.rows, admin_id)
    return BulkUploadResponse(
        message=f"{created} questions uploaded successfully",
        created=created,
        skipped=skipped,
    )


@router.put("/questions/{question_id}", response_model=QuestionResponse)
async def update_question(
    question_id: UUID,
    payload: QuestionUpdate,
    db: Session = Depends(get_db)
):
    return admin_service.update_question(db, question_id, payload)


@router.delete("/questions/{question_id}", response_model=MessageResponse)
async def delete_question(question_id: UUID, db: Session = Depends(get_db)):
    """Delete a question and remove it from every quiz that uses it"""
    admin_service.delete_question(db, question_id)
    return MessageResponse(message="Question deleted successfully")


# Quizzes

@router.get("/quizzes", response_model=List[QuizSummary])
async def list_all_quizzes(db: Session = Depends(get_db)):
    """All quizzes, inactive ones included"""
    return admin_service.list_quizzes(db)


@router.post("/quizzes", response_model=QuizDetail, status_code=201)
async def create_quiz(
    payload: QuizCreate,
    admin_id: UUID = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    return admin_service.create_quiz(db, payload, admin_id)


@router.put("/quizzes/{quiz_id}", response_model=QuizDetail)
async def update_quiz(
    quiz_id: UUID,
    payload: QuizUpdate,
    db: Session = Depends(get_db)
):
    return admin_service.update_quiz(db, quiz_id, payload)


@router.delete("/quizzes/{quiz_id}", response_model=MessageResponse)
async def delete_quiz(quiz_id: UUID, db: Session = Depends(get_db)):
    admin_service.delete_quiz(db, quiz_id)
    return MessageResponse(message="Quiz deleted successfully")


# Attempts

@router.get("/attempts", response_model=List[AttemptSummary])
async def list_attempts(db: Session = Depends(get_db)):
    """Every attempt, newest first"""
    return admin_service.list_attempts(db)
