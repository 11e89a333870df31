"""
Administration service - question bank, quiz composition and dashboard
"""
import logging
import math
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from app.exceptions import NotFoundError, ValidationError
from app.models import Question, Quiz, QuizQuestion, QuizAttempt
from app.schemas.question import (
    BulkQuestionRow, QuestionCreate, QuestionResponse, QuestionUpdate
)
from app.schemas.quiz import QuizCreate, QuizUpdate
from app.services.quiz_service import attempt_summaries, quiz_detail, quiz_summary
from app.utils.cache import cache_service

logger = logging.getLogger(__name__)

BULK_DEFAULT_CATEGORY = "General"
BULK_DEFAULT_DIFFICULTY = "medium"
DIFFICULTIES = ("easy", "medium", "hard")


class AdminService:
    """CRUD and aggregation operations for administrators"""

    # ------------------------------------------------------------------
    # Questions
    # ------------------------------------------------------------------

    def list_questions(
        self,
        db: Session,
        page: int = 1,
        limit: int = 10,
        category: Optional[str] = None,
        search: Optional[str] = None
    ) -> Dict[str, Any]:
        query = db.query(Question)

        if category and category != "all":
            query = query.filter(Question.category == category)

        if search:
            query = query.filter(Question.question.ilike(f"%{search}%"))

        total = query.count()
        questions = (
            query.order_by(Question.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
            .all()
        )

        return {
            "questions": [QuestionResponse.model_validate(question) for question in questions],
            "total": total,
            "total_pages": math.ceil(total / limit) if limit else 0,
            "current_page": page,
        }

    def _get_question(self, db: Session, question_id: UUID) -> Question:
        question = db.query(Question).filter(Question.id == question_id).first()
        if not question:
            raise NotFoundError("Question not found")
        return question

    def create_question(self, db: Session, data: QuestionCreate, admin_id: UUID) -> Question:
        question = Question(
            question=data.question,
            options=data.options,
            correct_option_index=data.correct_option_index,
            category=data.category,
            difficulty=data.difficulty,
            explanation=data.explanation or "",
            created_by=admin_id,
        )
        self._commit(db, question)
        logger.info(f"Question created: {question.id}")
        return question

    def update_question(self, db: Session, question_id: UUID, data: QuestionUpdate) -> Question:
        question = self._get_question(db, question_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None:
                continue
            setattr(question, field, value)

        quiz_ids = [link.quiz_id for link in question.quiz_links]
        self._commit(db, question)

        for quiz_id in quiz_ids:
            cache_service.clear_quiz_cache(str(quiz_id))

        logger.info(f"Question updated: {question_id}")
        return question

    def delete_question(self, db: Session, question_id: UUID) -> None:
        """
        Delete a question and unlink it from every quiz

        Rejected when any quiz would be left without questions.
        """
        question = self._get_question(db, question_id)

        quizzes = [link.quiz for link in question.quiz_links]
        emptied = [quiz.title for quiz in quizzes if len(quiz.question_links) <= 1]
        if emptied:
            raise ValidationError(
                "Question is the only question of one or more quizzes",
                errors=[f"Quiz '{title}' would have no questions" for title in emptied],
            )

        try:
            db.delete(question)
            db.flush()
            # Close the gaps left in each quiz's ordering
            for quiz in quizzes:
                db.refresh(quiz)
                for position, link in enumerate(quiz.question_links):
                    link.position = position
            db.commit()
        except Exception:
            db.rollback()
            raise

        for quiz in quizzes:
            cache_service.clear_quiz_cache(str(quiz.id))

        logger.info(f"Question deleted: {question_id}, unlinked from {len(quizzes)} quizzes")

    def _row_to_question(self, row: BulkQuestionRow, admin_id: UUID) -> Optional[Question]:
        """Map one imported row; None when a required cell is missing"""
        text = (row.question or "").strip()
        options = [(option or "").strip() for option in (row.option1, row.option2, row.option3, row.option4)]
        if not text or not all(options):
            return None

        try:
            correct = int(row.correct_answer)
        except (TypeError, ValueError):
            correct = 0
        if not 0 <= correct <= 3:
            correct = 0

        difficulty = (row.difficulty or "").strip().lower()
        if difficulty not in DIFFICULTIES:
            difficulty = BULK_DEFAULT_DIFFICULTY

        return Question(
            question=text,
            options=options,
            correct_option_index=correct,
            category=(row.category or "").strip()[:50] or BULK_DEFAULT_CATEGORY,
            difficulty=difficulty,
            explanation=row.explanation or "",
            created_by=admin_id,
        )

    def bulk_create_questions(
        self,
        db: Session,
        rows: List[BulkQuestionRow],
        admin_id: UUID
    ) -> Tuple[int, int]:
        """
        Import decoded spreadsheet rows

        Returns:
            Tuple of (created, skipped)
        """
        questions = []
        for row in rows:
            question = self._row_to_question(row, admin_id)
            if question is not None:
                questions.append(question)

        skipped = len(rows) - len(questions)

        if questions:
            try:
                db.add_all(questions)
                db.commit()
            except Exception:
                db.rollback()
                raise

        logger.info(f"Bulk import: {len(questions)} created, {skipped} skipped")
        return len(questions), skipped

    # ------------------------------------------------------------------
    # Quizzes
    # ------------------------------------------------------------------

    def _get_quiz(self, db: Session, quiz_id: UUID) -> Quiz:
        quiz = (
            db.query(Quiz)
            .options(selectinload(Quiz.question_links).selectinload(QuizQuestion.question))
            .filter(Quiz.id == quiz_id)
            .first()
        )
        if not quiz:
            raise NotFoundError("Quiz not found")
        return quiz

    def _check_questions_exist(self, db: Session, question_ids: List[UUID]) -> None:
        if not question_ids:
            raise ValidationError("At least one question must be selected")

        found = {
            row[0]
            for row in db.query(Question.id).filter(Question.id.in_(question_ids)).all()
        }
        missing = [str(question_id) for question_id in question_ids if question_id not in found]
        if missing:
            raise ValidationError(
                "Some selected questions do not exist",
                errors=[f"Unknown question: {question_id}" for question_id in missing],
            )

    def list_quizzes(self, db: Session) -> List[Dict[str, Any]]:
        """All quizzes, inactive included, newest first"""
        quizzes = (
            db.query(Quiz)
            .options(selectinload(Quiz.question_links))
            .order_by(Quiz.created_at.desc())
            .all()
        )
        return [quiz_summary(quiz) for quiz in quizzes]

    def create_quiz(self, db: Session, data: QuizCreate, admin_id: UUID) -> Dict[str, Any]:
        self._check_questions_exist(db, data.question_ids)

        quiz = Quiz(
            title=data.title,
            description=data.description,
            time_limit_minutes=data.time_limit_minutes,
            category=data.category,
            is_active=data.is_active,
            created_by=admin_id,
        )
        quiz.question_links = [
            QuizQuestion(question_id=question_id, position=position)
            for position, question_id in enumerate(data.question_ids)
        ]
        self._commit(db, quiz)

        logger.info(f"Quiz created: {quiz.id} with {len(data.question_ids)} questions")
        return quiz_detail(self._get_quiz(db, quiz.id))

    def update_quiz(self, db: Session, quiz_id: UUID, data: QuizUpdate) -> Dict[str, Any]:
        quiz = self._get_quiz(db, quiz_id)
        changes = data.model_dump(exclude_unset=True)
        question_ids = changes.pop("question_ids", None)

        if "question_ids" in data.model_fields_set:
            # An explicit null is as invalid as an empty list
            self._check_questions_exist(db, question_ids or [])

        for field, value in changes.items():
            if value is None:
                continue
            setattr(quiz, field, value)

        try:
            if question_ids:
                # Old links must be flushed away first, new ones may reuse their keys
                quiz.question_links.clear()
                db.flush()
                quiz.question_links.extend(
                    QuizQuestion(question_id=question_id, position=position)
                    for position, question_id in enumerate(question_ids)
                )
            db.commit()
        except Exception:
            db.rollback()
            raise

        cache_service.clear_quiz_cache(str(quiz_id))
        logger.info(f"Quiz updated: {quiz_id}")
        return quiz_detail(self._get_quiz(db, quiz_id))

    def delete_quiz(self, db: Session, quiz_id: UUID) -> None:
        """Delete a quiz and its question links; attempts are kept"""
        quiz = self._get_quiz(db, quiz_id)
        try:
            db.delete(quiz)
            db.commit()
        except Exception:
            db.rollback()
            raise

        cache_service.clear_quiz_cache(str(quiz_id))
        logger.info(f"Quiz deleted: {quiz_id}")

    # ------------------------------------------------------------------
    # Attempts and dashboard
    # ------------------------------------------------------------------

    def list_attempts(self, db: Session) -> List[Dict[str, Any]]:
        attempts = db.query(QuizAttempt).order_by(QuizAttempt.created_at.desc()).all()
        return attempt_summaries(db, attempts)

    def get_dashboard_stats(self, db: Session, recent_limit: int = 10) -> Dict[str, Any]:
        """
        Aggregate counts for the admin dashboard

        Returns:
            Totals, distinct users with attempts, recent attempts and
            quiz counts per category (largest first)
        """
        total_quizzes = db.query(func.count(Quiz.id)).scalar() or 0
        total_questions = db.query(func.count(Question.id)).scalar() or 0
        total_attempts = db.query(func.count(QuizAttempt.id)).scalar() or 0
        total_users = db.query(func.count(func.distinct(QuizAttempt.user_id))).scalar() or 0

        recent = (
            db.query(QuizAttempt)
            .order_by(QuizAttempt.created_at.desc())
            .limit(recent_limit)
            .all()
        )

        category_rows = (
            db.query(Quiz.category, func.count(Quiz.id).label("count"))
            .group_by(Quiz.category)
            .order_by(func.count(Quiz.id).desc(), Quiz.category)
            .all()
        )

        return {
            "total_quizzes": total_quizzes,
            "total_questions": total_questions,
            "total_attempts": total_attempts,
            "total_users": total_users,
            "recent_attempts": attempt_summaries(db, recent),
            "category_stats": [
                {"category": category, "count": count}
                for category, count in category_rows
            ],
        }

    def _commit(self, db: Session, instance) -> None:
        try:
            db.add(instance)
            db.commit()
            db.refresh(instance)
        except Exception:
            db.rollback()
            raise


# Global instance
admin_service = AdminService()
