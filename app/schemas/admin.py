"""
Pydantic schemas for administration endpoints
"""
from pydantic import BaseModel
from typing import List

from app.schemas.question import QuestionResponse
from app.schemas.quiz import AttemptSummary


class CategoryCount(BaseModel):
    category: str
    count: int


class DashboardStats(BaseModel):
    """Aggregate counts for the admin dashboard"""
    total_quizzes: int
    total_questions: int
    total_attempts: int
    total_users: int
    recent_attempts: List[AttemptSummary]
    category_stats: List[CategoryCount]


class QuestionPage(BaseModel):
    """One page of the question bank"""
    questions: List[QuestionResponse]
    total: int
    total_pages: int
    current_page: int


class MessageResponse(BaseModel):
    message: str
