"""
QuizAttempt model - stores quiz submissions and their scores
"""
from sqlalchemy import Column, Integer, Boolean, DateTime, Uuid, JSON
from app.database import Base, utcnow
from app.services.grading_service import grading_service
import uuid


class QuizAttempt(Base):
    """
    Quiz attempts table - immutable record of one submission

    quiz_id is a plain reference so attempts outlive a deleted quiz.
    """
    __tablename__ = "quiz_attempts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, nullable=False, index=True)
    quiz_id = Column(Uuid, nullable=False, index=True)
    answers = Column(JSON, nullable=False)  # [{question_id, selected_option_index}]
    score = Column(Integer, nullable=False, default=0)
    total_questions = Column(Integer, nullable=False)
    time_taken_seconds = Column(Integer, nullable=False)
    completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    @property
    def percentage(self) -> float:
        return grading_service.calculate_percentage(self.score, self.total_questions or 0)

    def __repr__(self):
        return f"<QuizAttempt(user_id={self.user_id}, quiz_id={self.quiz_id}, score={self.score}/{self.total_questions})>"
