import datetime
import logging
import time
from typing import Dict, Iterable, List, Optional, Union

from sql_practice.databases.types import StoreKind
from sql_practice.practice.comparator import build_hint, compare_results
from sql_practice.practice.questions import Difficulty, PracticeQuestion, default_questions
from sql_practice.query_executor import ExecutionOptions, QueryExecutor, elapsed_ms
from sql_practice.results.progress import ProgressRecorder
from sql_practice.results.validation_result import ValidationOutcome

logger = logging.getLogger(__name__)

CORRECT_MESSAGE = "Excellent! Your solution is correct!"
INCORRECT_MESSAGE = "Not quite right. Compare your output with the expected result."


class PracticeService:
    """
    Grades learner SQL against each question's reference solution.

    Both the submission and the reference run on the practice store in its
    current state. Resetting the store between questions is up to the caller.
    """

    def __init__(self, executor: QueryExecutor,
                 questions: Optional[Iterable[PracticeQuestion]] = None,
                 progress: Optional[ProgressRecorder] = None,
                 options: Optional[ExecutionOptions] = None):
        self.executor = executor
        self.progress = progress
        self.options = options
        self._questions: Dict[str, PracticeQuestion] = {}

        for question in (default_questions() if questions is None else questions):
            if question.id in self._questions:
                raise ValueError(f"Duplicate question id: {question.id}")
            self._questions[question.id] = question

        logger.info(f"Practice service initialized with {len(self._questions)} questions")

    def validate(self, question_id: str, submitted_sql: str) -> ValidationOutcome:
        question = self._questions.get(question_id)
        if question is None:
            return ValidationOutcome(correct=False, message="Question not found", question_id=question_id)

        start_time = time.perf_counter()
        if self.progress is not None:
            self.progress.record_attempt(question_id, datetime.datetime.now())

        submitted_result = self.executor.execute(submitted_sql, StoreKind.PRACTICE, self.options)
        if not submitted_result.success:
            self._record_result(question, False, 0)
            return ValidationOutcome(
                correct=False,
                message=f"Query execution failed: {submitted_result.message}",
                question_id=question_id,
                submitted_query=submitted_sql,
                submitted_result=submitted_result,
                execution_time_ms=elapsed_ms(start_time),
            )

        reference_result = self.executor.execute(question.solution, StoreKind.PRACTICE, self.options)
        if not reference_result.success:
            logger.error(f"Reference solution for {question_id} failed: {reference_result.message}")
            self._record_result(question, False, 0)
            return ValidationOutcome(
                correct=False,
                message=f"Reference solution could not be executed: {reference_result.message}",
                question_id=question_id,
                submitted_query=submitted_sql,
                submitted_result=submitted_result,
                reference_result=reference_result,
                execution_time_ms=elapsed_ms(start_time),
            )

        comparison = compare_results(submitted_result, reference_result)

        if comparison.equivalent:
            points = question.effective_points
            self._record_result(question, True, points)
            logger.info(f"Question {question_id} answered correctly (+{points} points)")
            return ValidationOutcome(
                correct=True,
                message=CORRECT_MESSAGE,
                question_id=question_id,
                submitted_query=submitted_sql,
                submitted_result=submitted_result,
                reference_result=reference_result,
                points_earned=points,
                execution_time_ms=elapsed_ms(start_time),
            )

        self._record_result(question, False, 0)
        logger.debug(f"Question {question_id} answered incorrectly: {comparison.detail}")
        return ValidationOutcome(
            correct=False,
            message=INCORRECT_MESSAGE,
            question_id=question_id,
            submitted_query=submitted_sql,
            submitted_result=submitted_result,
            reference_result=reference_result,
            execution_time_ms=elapsed_ms(start_time),
            hint=build_hint(comparison, question.hint),
        )

    def _record_result(self, question: PracticeQuestion, correct: bool, points: int) -> None:
        if self.progress is not None:
            self.progress.record_result(question.id, correct, points)

    def get_question(self, question_id: str) -> Optional[PracticeQuestion]:
        return self._questions.get(question_id)

    def all_questions(self) -> List[PracticeQuestion]:
        return list(self._questions.values())

    @property
    def total_questions(self) -> int:
        return len(self._questions)

    def questions_by_difficulty(self, difficulty: Union[Difficulty, str]) -> List[PracticeQuestion]:
        if isinstance(difficulty, str):
            if difficulty.lower() == "all":
                return self.all_questions()
            difficulty = Difficulty[difficulty.upper()]
        return [q for q in self._questions.values() if q.difficulty is difficulty]

    def question_counts_by_difficulty(self) -> Dict[str, int]:
        return {
            difficulty.name.lower(): len(self.questions_by_difficulty(difficulty))
            for difficulty in Difficulty
        }
