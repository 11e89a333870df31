"""
Database models package
"""
from app.models.question import Question
from app.models.quiz import Quiz, QuizQuestion
from app.models.quiz_attempt import QuizAttempt

__all__ = ["Question", "Quiz", "QuizQuestion", "QuizAttempt"]
