# ABOUTME: Completion progress for a dream, derived from its steps (never stored).
# ABOUTME: Percent is rounded half up so 2 of 8 shows 25% and 1 of 8 shows 13%.

import math
from dataclasses import dataclass
from typing import Iterable

from core.database import Step


@dataclass(frozen=True)
class Progress:
    completed: int
    total: int
    percent: int

    def to_json(self) -> dict:
        return {"completed": self.completed, "total": self.total, "percent": self.percent}


def compute_progress(steps: Iterable[Step]) -> Progress:
    """Count completed steps; a dream with no steps is 0%."""
    steps = list(steps)
    total = len(steps)
    completed = sum(1 for s in steps if s.completed)
    if total == 0:
        return Progress(completed=0, total=0, percent=0)
    percent = math.floor(completed / total * 100 + 0.5)
    return Progress(completed=completed, total=total, percent=percent)
