"""
Question model - multiple-choice questions curated by administrators
"""
from sqlalchemy import Column, String, Integer, Text, DateTime, Uuid, JSON
from sqlalchemy.orm import relationship
from app.database import Base, utcnow
import uuid


class Question(Base):
    """
    Questions table - one MCQ with exactly four options and one correct index
    """
    __tablename__ = "questions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    question = Column(Text, nullable=False)
    options = Column(JSON, nullable=False)  # ["opt A", "opt B", "opt C", "opt D"]
    correct_option_index = Column(Integer, nullable=False)  # 0..3
    category = Column(String(50), nullable=False, index=True)
    difficulty = Column(String(20), nullable=False, default="medium")
    explanation = Column(Text, default="")
    created_by = Column(Uuid, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    quiz_links = relationship(
        "QuizQuestion",
        back_populates="question",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<Question(id={self.id}, category={self.category})>"
