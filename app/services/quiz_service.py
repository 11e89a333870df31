"""
Quiz service - listing, start view, submission and attempt history
"""
import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from app.config import settings
from app.exceptions import AuthorizationError, NotFoundError
from app.models import Quiz, QuizQuestion, QuizAttempt
from app.schemas.question import QuestionResponse
from app.services.grading_service import grading_service
from app.utils.cache import cache_service

logger = logging.getLogger(__name__)


def quiz_summary(quiz: Quiz) -> Dict[str, Any]:
    """Listing fields shared by the public and admin views"""
    return {
        "id": quiz.id,
        "title": quiz.title,
        "description": quiz.description,
        "category": quiz.category,
        "time_limit_minutes": quiz.time_limit_minutes,
        "total_questions": len(quiz.question_links),
        "is_active": quiz.is_active,
        "created_at": quiz.created_at,
    }


def quiz_detail(quiz: Quiz) -> Dict[str, Any]:
    """Full quiz including the answer key"""
    detail = quiz_summary(quiz)
    detail["created_by"] = quiz.created_by
    detail["questions"] = [QuestionResponse.model_validate(question) for question in quiz.questions]
    return detail


def attempt_summary(attempt: QuizAttempt, quiz: Optional[Quiz]) -> Dict[str, Any]:
    return {
        "id": attempt.id,
        "user_id": attempt.user_id,
        "quiz_id": attempt.quiz_id,
        "quiz_title": quiz.title if quiz else None,
        "quiz_category": quiz.category if quiz else None,
        "score": attempt.score,
        "total_questions": attempt.total_questions,
        "percentage": attempt.percentage,
        "time_taken_seconds": attempt.time_taken_seconds,
        "completed": attempt.completed,
        "created_at": attempt.created_at,
    }


def attempt_summaries(db: Session, attempts: List[QuizAttempt]) -> List[Dict[str, Any]]:
    """Summaries with quiz title/category resolved in one query"""
    quiz_ids = {attempt.quiz_id for attempt in attempts}
    quizzes = {}
    if quiz_ids:
        quizzes = {
            quiz.id: quiz
            for quiz in db.query(Quiz).filter(Quiz.id.in_(list(quiz_ids))).all()
        }
    return [attempt_summary(attempt, quizzes.get(attempt.quiz_id)) for attempt in attempts]


class QuizService:
    """Read and submit operations available to quiz takers"""

    def _load_quiz(self, db: Session, quiz_id: UUID) -> Optional[Quiz]:
        return (
            db.query(Quiz)
            .options(selectinload(Quiz.question_links).selectinload(QuizQuestion.question))
            .filter(Quiz.id == quiz_id)
            .first()
        )

    def get_active_quiz(self, db: Session, quiz_id: UUID) -> Quiz:
        """Load a quiz that end users may see; inactive quizzes are not found"""
        quiz = self._load_quiz(db, quiz_id)
        if not quiz or not quiz.is_active:
            raise NotFoundError("Quiz not found")
        return quiz

    def list_quizzes(
        self,
        db: Session,
        category: Optional[str] = None,
        search: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        List active quizzes, newest first

        Args:
            category: Exact category match; "all" or empty disables the filter
            search: Case-insensitive substring of title or description
        """
        query = (
            db.query(Quiz)
            .options(selectinload(Quiz.question_links))
            .filter(Quiz.is_active.is_(True))
        )

        if category and category != "all":
            query = query.filter(Quiz.category == category)

        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(Quiz.title.ilike(pattern), Quiz.description.ilike(pattern))
            )

        quizzes = query.order_by(Quiz.created_at.desc()).all()
        return [quiz_summary(quiz) for quiz in quizzes]

    def list_categories(self, db: Session) -> List[str]:
        rows = (
            db.query(Quiz.category)
            .filter(Quiz.is_active.is_(True))
            .distinct()
            .all()
        )
        return sorted(row[0] for row in rows)

    def get_quiz_detail(self, db: Session, quiz_id: UUID) -> Dict[str, Any]:
        return quiz_detail(self.get_active_quiz(db, quiz_id))

    def start_quiz(self, db: Session, quiz_id: UUID) -> Dict[str, Any]:
        """
        Build the answer-stripped view of an active quiz

        Served from cache when available. Admin edits invalidate the entry.
        """
        cache_key = cache_service.start_view_key(str(quiz_id))
        cached_view = cache_service.get(cache_key)
        if cached_view:
            return cached_view

        quiz = self.get_active_quiz(db, quiz_id)

        view = {
            "id": str(quiz.id),
            "title": quiz.title,
            "description": quiz.description,
            "time_limit_minutes": quiz.time_limit_minutes,
            "total_questions": len(quiz.question_links),
            "questions": [
                {
                    "id": str(question.id),
                    "question": question.question,
                    "options": list(question.options),
                }
                for question in quiz.questions
            ],
        }

        cache_service.set(cache_key, view)
        return view

    def submit_quiz(
        self,
        db: Session,
        quiz_id: UUID,
        user_id: UUID,
        answers: List[Any],
        time_taken_seconds: int
    ) -> Dict[str, Any]:
        """
        Grade a submission and persist the attempt

        The active flag is not re-checked, so a quiz deactivated mid-attempt
        can still be submitted. Scoring uses the quiz's current question set.
        """
        quiz = self._load_quiz(db, quiz_id)
        if not quiz:
            raise NotFoundError("Quiz not found")

        questions = quiz.questions
        logger.info(f"Grading quiz {quiz_id} for user {user_id}")

        score, breakdown = grading_service.grade_quiz(questions, answers)
        total_questions = len(questions)

        attempt = QuizAttempt(
            user_id=user_id,
            quiz_id=quiz_id,
            answers=[
                {
                    "question_id": str(item["question_id"]),
                    "selected_option_index": item["selected_option_index"],
                }
                for item in breakdown
            ],
            score=score,
            total_questions=total_questions,
            time_taken_seconds=time_taken_seconds,
            completed=True,
        )

        try:
            db.add(attempt)
            db.commit()
            db.refresh(attempt)
        except Exception:
            db.rollback()
            raise

        logger.info(f"Quiz attempt saved: {attempt.id}, score: {score}/{total_questions}")

        return {
            "message": "Quiz submitted successfully",
            "attempt_id": attempt.id,
            "score": score,
            "total_questions": total_questions,
            "percentage": grading_service.calculate_percentage(score, total_questions),
            "time_taken_seconds": time_taken_seconds,
            "answers": breakdown,
        }

    def get_user_attempts(
        self,
        db: Session,
        user_id: UUID,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """A user's most recent attempts, read straight from the attempts table"""
        limit = limit or settings.RECENT_ATTEMPTS_LIMIT
        attempts = (
            db.query(QuizAttempt)
            .filter(QuizAttempt.user_id == user_id)
            .order_by(QuizAttempt.created_at.desc())
            .limit(limit)
            .all()
        )
        return attempt_summaries(db, attempts)

    def get_attempt(
        self,
        db: Session,
        attempt_id: UUID,
        user_id: UUID
    ) -> Dict[str, Any]:
        """One attempt with its stored answers; only its owner may read it"""
        attempt = db.query(QuizAttempt).filter(QuizAttempt.id == attempt_id).first()
        if not attempt:
            raise NotFoundError("Attempt not found")

        if attempt.user_id != user_id:
            logger.warning(f"User {user_id} denied access to attempt {attempt_id}")
            raise AuthorizationError("Not allowed to view this attempt")

        quiz = db.query(Quiz).filter(Quiz.id == attempt.quiz_id).first()
        detail = attempt_summary(attempt, quiz)
        detail["answers"] = attempt.answers
        return detail


# Global instance
quiz_service = QuizService()
