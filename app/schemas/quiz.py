"""
Pydantic schemas for quiz-related requests and responses
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Any, Optional
from uuid import UUID
from datetime import datetime

from app.schemas.question import QuestionResponse


def _unique_ids(value: List[UUID]) -> List[UUID]:
    seen = set()
    unique = []
    for question_id in value:
        if question_id not in seen:
            seen.add(question_id)
            unique.append(question_id)
    return unique


class QuizCreate(BaseModel):
    """Schema for creating a quiz"""
    title: str = Field(..., min_length=3, max_length=100)
    description: str = Field(..., min_length=10, max_length=500)
    question_ids: List[UUID] = Field(..., min_length=1, description="Ordered question ids")
    time_limit_minutes: int = Field(..., ge=1, le=300)
    category: str = Field(..., min_length=2, max_length=50)
    is_active: bool = True

    @field_validator("title", "description", "category", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("question_ids")
    @classmethod
    def dedupe_questions(cls, value: List[UUID]) -> List[UUID]:
        return _unique_ids(value)


class QuizUpdate(BaseModel):
    """Partial update; question_ids, when given, must stay non-empty"""
    title: Optional[str] = Field(None, min_length=3, max_length=100)
    description: Optional[str] = Field(None, min_length=10, max_length=500)
    question_ids: Optional[List[UUID]] = Field(None, min_length=1)
    time_limit_minutes: Optional[int] = Field(None, ge=1, le=300)
    category: Optional[str] = Field(None, min_length=2, max_length=50)
    is_active: Optional[bool] = None

    @field_validator("title", "description", "category", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("question_ids")
    @classmethod
    def dedupe_questions(cls, value: Optional[List[UUID]]) -> Optional[List[UUID]]:
        if value is None:
            return value
        return _unique_ids(value)


class QuizSummary(BaseModel):
    """Quiz listing entry"""
    id: UUID
    title: str
    description: str
    category: str
    time_limit_minutes: int
    total_questions: int
    is_active: bool
    created_at: Optional[datetime] = None


class QuizDetail(QuizSummary):
    """Quiz with full question data, answer key included"""
    created_by: UUID
    questions: List[QuestionResponse]


class StartQuestion(BaseModel):
    """Question as shown to a quiz taker - no answer key, no explanation"""
    id: UUID
    question: str
    options: List[str]


class QuizStartResponse(BaseModel):
    """Answer-stripped view returned when a user starts a quiz"""
    id: UUID
    title: str
    description: str
    time_limit_minutes: int
    total_questions: int
    questions: List[StartQuestion]


class QuizSubmission(BaseModel):
    """
    Schema for quiz submission

    answers[i] answers the i-th question of the quiz; null means unanswered.
    Values are not range-checked here, the grader treats anything that is
    not a valid option index as unanswered.
    """
    answers: List[Any] = Field(default_factory=list)
    time_taken_seconds: int = Field(0, ge=0, description="Client-reported elapsed time")


class QuestionResult(BaseModel):
    """Grading details for a single question"""
    question_id: UUID
    question: str
    options: List[str]
    selected_option_index: Optional[int] = None
    correct_option_index: int
    is_correct: bool
    explanation: Optional[str] = ""


class QuizSubmissionResult(BaseModel):
    """Response after quiz grading"""
    message: str = "Quiz submitted successfully"
    attempt_id: UUID
    score: int
    total_questions: int
    percentage: float
    time_taken_seconds: int
    answers: List[QuestionResult]


class AttemptAnswer(BaseModel):
    question_id: UUID
    selected_option_index: Optional[int] = None


class AttemptSummary(BaseModel):
    """One entry of a user's attempt history"""
    id: UUID
    user_id: UUID
    quiz_id: UUID
    quiz_title: Optional[str] = None
    quiz_category: Optional[str] = None
    score: int
    total_questions: int
    percentage: float
    time_taken_seconds: int
    completed: bool
    created_at: Optional[datetime] = None


class AttemptDetail(AttemptSummary):
    answers: List[AttemptAnswer]
