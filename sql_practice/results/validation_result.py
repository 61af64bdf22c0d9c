import datetime
from dataclasses import dataclass, field
from typing import Optional

from sql_practice.results.query_result import TabularResult


@dataclass
class ValidationOutcome:
    """Verdict for one graded submission."""
    correct: bool
    message: str
    question_id: str
    submitted_query: Optional[str] = None
    submitted_result: Optional[TabularResult] = None
    reference_result: Optional[TabularResult] = None
    points_earned: int = 0          # > 0 only when correct
    execution_time_ms: int = 0
    hint: Optional[str] = None      # set only when not correct
    timestamp: datetime.datetime = field(default_factory=datetime.datetime.now)

    @property
    def execution_time_display(self) -> str:
        return f"{self.execution_time_ms}ms"

    @property
    def formatted_message(self) -> str:
        if self.correct:
            return f"{self.message} (+{self.points_earned} points)"
        return self.message


@dataclass(frozen=True)
class SyntaxCheck:
    valid: bool
    message: str
