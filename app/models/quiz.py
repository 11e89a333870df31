"""
Quiz model - timed collections of questions
"""
from sqlalchemy import (
    Column, String, Integer, Boolean, Text, DateTime, ForeignKey, Uuid
)
from sqlalchemy.orm import relationship
from app.database import Base, utcnow
import uuid


class Quiz(Base):
    """
    Quizzes table - metadata plus an ordered list of question links
    """
    __tablename__ = "quizzes"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    time_limit_minutes = Column(Integer, nullable=False)
    category = Column(String(50), nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_by = Column(Uuid, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    question_links = relationship(
        "QuizQuestion",
        back_populates="quiz",
        order_by="QuizQuestion.position",
        cascade="all, delete-orphan",
    )

    @property
    def questions(self):
        """Questions in stored order"""
        return [link.question for link in self.question_links]

    @property
    def question_ids(self):
        return [link.question_id for link in self.question_links]

    def __repr__(self):
        return f"<Quiz(id={self.id}, title={self.title}, active={self.is_active})>"


class QuizQuestion(Base):
    """
    Association table - which questions a quiz holds, and in what order
    """
    __tablename__ = "quiz_questions"

    quiz_id = Column(Uuid, ForeignKey("quizzes.id", ondelete="CASCADE"), primary_key=True)
    question_id = Column(
        Uuid, ForeignKey("questions.id", ondelete="CASCADE"), primary_key=True
    )
    position = Column(Integer, nullable=False)

    quiz = relationship("Quiz", back_populates="question_links")
    question = relationship("Question", back_populates="quiz_links")

    def __repr__(self):
        return f"<QuizQuestion(quiz_id={self.quiz_id}, question_id={self.question_id}, position={self.position})>"
