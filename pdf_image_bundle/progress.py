"""
Progress reporting for bundling runs.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Protocol

logger = logging.getLogger(__name__)


class ProgressSink(Protocol):
    """Anything that accepts a completion percentage."""

    def report(self, percent: float) -> None:
        ...


@dataclass
class ProgressTracker:
    """Holds the current progress value for a UI to poll."""

    value: float = 0.0
    history: List[float] = field(default_factory=list)
    listeners: List[Callable[[float], None]] = field(default_factory=list)

    def reset(self) -> None:
        self.value = 0.0
        self.history.clear()

    def report(self, percent: float) -> None:
        percent = min(100.0, max(0.0, float(percent)))
        if percent < self.value:
            logger.debug(f"Ignoring progress regression {percent:.1f} < {self.value:.1f}")
            return

        self.value = percent
        self.history.append(percent)
        for listener in self.listeners:
            listener(percent)
