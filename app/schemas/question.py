"""
Pydantic schemas for question-related requests and responses
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional, Any
from uuid import UUID
from datetime import datetime

DIFFICULTY_PATTERN = "^(easy|medium|hard)$"


def _clean_options(options: List[str]) -> List[str]:
    cleaned = [option.strip() for option in options]
    if any(not option for option in cleaned):
        raise ValueError("Options must not be empty")
    return cleaned


class QuestionCreate(BaseModel):
    """Schema for creating a question"""
    question: str = Field(..., min_length=1, description="Question text")
    options: List[str] = Field(..., min_length=4, max_length=4, description="Exactly 4 options")
    correct_option_index: int = Field(..., ge=0, le=3, description="Index of the correct option")
    category: str = Field(..., min_length=1, max_length=50)
    difficulty: str = Field("medium", pattern=DIFFICULTY_PATTERN)
    explanation: Optional[str] = Field("", max_length=2000)

    @field_validator("question", "category")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Must not be blank")
        return value

    @field_validator("options")
    @classmethod
    def options_not_blank(cls, value: List[str]) -> List[str]:
        return _clean_options(value)


class QuestionUpdate(BaseModel):
    """Partial update; omitted fields keep their stored value"""
    question: Optional[str] = Field(None, min_length=1)
    options: Optional[List[str]] = Field(None, min_length=4, max_length=4)
    correct_option_index: Optional[int] = Field(None, ge=0, le=3)
    category: Optional[str] = Field(None, min_length=1, max_length=50)
    difficulty: Optional[str] = Field(None, pattern=DIFFICULTY_PATTERN)
    explanation: Optional[str] = Field(None, max_length=2000)

    @field_validator("question", "category")
    @classmethod
    def not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Must not be blank")
        return value

    @field_validator("options")
    @classmethod
    def options_not_blank(cls, value: Optional[List[str]]) -> Optional[List[str]]:
        if value is None:
            return value
        return _clean_options(value)


class QuestionResponse(BaseModel):
    """Full question, including the answer key"""
    id: UUID
    question: str
    options: List[str]
    correct_option_index: int
    category: str
    difficulty: str
    explanation: Optional[str] = ""
    created_by: UUID
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BulkQuestionRow(BaseModel):
    """
    One decoded spreadsheet row

    Everything is optional here; incomplete rows are skipped by the importer
    rather than rejected.
    """
    question: Optional[str] = None
    option1: Optional[str] = None
    option2: Optional[str] = None
    option3: Optional[str] = None
    option4: Optional[str] = None
    correct_answer: Optional[Any] = None
    category: Optional[str] = None
    difficulty: Optional[str] = None
    explanation: Optional[str] = None


class BulkUploadRequest(BaseModel):
    """Schema for bulk question import"""
    rows: List[BulkQuestionRow] = Field(..., min_length=1)


class BulkUploadResponse(BaseModel):
    message: str
    created: int
    skipped: int
