"""
Quiz grading service
MCQ answers are matched positionally against the stored answer key
"""
import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence, Tuple

if TYPE_CHECKING:
    from app.models import Question

logger = logging.getLogger(__name__)

OPTION_COUNT = 4


class GradingService:
    """
    Service for grading quiz submissions

    Strategy:
    - answers[i] is compared with the i-th question's correct option index
    - Extra answers are ignored
    - Missing, null, non-integer or out-of-range answers count as unanswered
    - Unanswered never matches
    """

    def normalize_answer(self, answer: Any) -> Optional[int]:
        """
        Reduce a submitted answer to a valid option index or None

        Booleans are rejected explicitly since bool is a subclass of int.
        """
        if isinstance(answer, bool) or not isinstance(answer, int):
            return None
        if not 0 <= answer < OPTION_COUNT:
            return None
        return answer

    def calculate_percentage(self, score: int, total_questions: int) -> float:
        """Score as a percentage rounded to 2 places; 0.0 for an empty quiz"""
        if total_questions <= 0:
            return 0.0
        return round(score / total_questions * 100, 2)

    def grade_quiz(
        self,
        questions: Sequence["Question"],
        answers: List[Any]
    ) -> Tuple[int, List[Dict[str, Any]]]:
        """
        Grade a complete quiz submission

        Args:
            questions: Quiz questions in stored order
            answers: User's answers aligned with questions

        Returns:
            Tuple of (score, breakdown) where breakdown has one entry per question
        """
        score = 0
        breakdown = []

        for index, question in enumerate(questions):
            raw_answer = answers[index] if index < len(answers) else None
            selected = self.normalize_answer(raw_answer)
            is_correct = selected is not None and selected == question.correct_option_index

            if is_correct:
                score += 1

            breakdown.append({
                "question_id": question.id,
                "question": question.question,
                "options": list(question.options),
                "selected_option_index": selected,
                "correct_option_index": question.correct_option_index,
                "is_correct": is_correct,
                "explanation": question.explanation or "",
            })

        if len(answers) > len(questions):
            logger.debug(f"Ignoring {len(answers) - len(questions)} extra answers")

        logger.info(f"Quiz graded: {score}/{len(questions)}")

        return score, breakdown


# Global instance
grading_service = GradingService()
