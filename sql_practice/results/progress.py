import datetime
from abc import ABC, abstractmethod
from typing import Dict, Set


class ProgressRecorder(ABC):
    """
    Receives attempt, completion and points events keyed by question id.

    The practice service only emits these events; persisting them is the
    recorder's business.
    """

    @abstractmethod
    def record_attempt(self, question_id: str, timestamp: datetime.datetime) -> None:
        pass

    @abstractmethod
    def record_result(self, question_id: str, correct: bool, points: int) -> None:
        pass


class InMemoryProgressRecorder(ProgressRecorder):
    """Complete progress counters for one practice session, kept in memory."""
    def __init__(self):
        self.attempts: Dict[str, int] = {}
        self.last_attempted: Dict[str, datetime.datetime] = {}
        self.completed_questions: Set[str] = set()
        self.total_submissions = 0
        self.successful_submissions = 0
        self.failed_submissions = 0
        self.total_points = 0
        self.current_streak = 0
        self.best_streak = 0

    def record_attempt(self, question_id: str, timestamp: datetime.datetime) -> None:
        self.attempts[question_id] = self.attempts.get(question_id, 0) + 1
        self.last_attempted[question_id] = timestamp

    def record_result(self, question_id: str, correct: bool, points: int) -> None:
        self.total_submissions += 1
        if not correct:
            self.failed_submissions += 1
            self.current_streak = 0
            return

        self.successful_submissions += 1
        self.total_points += points
        self.completed_questions.add(question_id)
        self.current_streak += 1
        self.best_streak = max(self.best_streak, self.current_streak)

    def attempts_for(self, question_id: str) -> int:
        return self.attempts.get(question_id, 0)

    def is_completed(self, question_id: str) -> bool:
        return question_id in self.completed_questions

    @property
    def success_rate(self) -> float:
        """Calculate percentage of correct submissions."""
        if self.total_submissions == 0:
            return 0.0
        return (self.successful_submissions / self.total_submissions) * 100
