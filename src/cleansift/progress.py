"""
Progress tracking for long scans.

The tracker is pull-based: callers update it as work completes and poll
it for percentage, rate and ETA. It never pushes events.

cleansift/src/cleansift/progress.py
"""

import time
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

__all__ = ["ProgressTracker", "OperationRecord", "format_duration"]


@dataclass(frozen=True)
class OperationRecord:
    """An operation that was active before the tracker switched to another."""

    operation: str
    completed_at: float
    items_processed: int


def format_duration(seconds: float) -> str:
    """Format seconds as ``12.3s``, ``4m 5.0s`` or ``1h 2m 3.0s``."""
    if seconds < 60:
        return f"{seconds:.1f}s"
    if seconds < 3600:
        return f"{int(seconds // 60)}m {seconds % 60:.1f}s"
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    return f"{hours}h {minutes}m {seconds % 60:.1f}s"


class ProgressTracker:
    """Tracks throughput and ETA for a single in-flight scan."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._start_time = clock()
        self._total_items = 0
        self._processed_items = 0
        self._current_operation = ""
        self._history: List[OperationRecord] = []

    @property
    def total_items(self) -> int:
        return self._total_items

    @property
    def processed_items(self) -> int:
        return self._processed_items

    @property
    def current_operation(self) -> str:
        return self._current_operation

    @property
    def operation_history(self) -> Tuple[OperationRecord, ...]:
        return tuple(self._history)

    def set_total(self, total: int) -> None:
        """Set the number of items to process and reset the processed count."""
        if total < 0:
            raise ValueError("Total must not be negative")
        self._total_items = total
        self._processed_items = 0

    def increment(self, count: int = 1) -> None:
        if count < 0:
            raise ValueError("Progress can only move forward")
        self._processed_items += count

    def set_current_operation(self, operation: str) -> None:
        """Switch to a new operation, archiving the active one first."""
        if self._current_operation:
            self._history.append(
                OperationRecord(
                    operation=self._current_operation,
                    completed_at=self._clock(),
                    items_processed=self._processed_items,
                )
            )
        self._current_operation = operation

    def reset(self) -> None:
        self._total_items = 0
        self._processed_items = 0
        self._current_operation = ""
        self._history = []
        self._start_time = self._clock()

    # --- Derived reads ---

    def progress_percentage(self) -> float:
        if self._total_items == 0:
            return 0.0
        return min(100.0, self._processed_items / self._total_items * 100)

    def elapsed_time(self) -> float:
        return self._clock() - self._start_time

    def items_per_second(self) -> float:
        elapsed = self.elapsed_time()
        return self._processed_items / elapsed if elapsed > 0 else 0.0

    def estimated_time_remaining(self) -> Optional[float]:
        """Seconds left at the current rate, or None before any progress."""
        if self._processed_items == 0 or self._total_items == 0:
            return None
        rate = self.items_per_second()
        if rate <= 0:
            return None
        remaining = max(0, self._total_items - self._processed_items)
        return remaining / rate

    def is_complete(self) -> bool:
        return self._total_items > 0 and self._processed_items >= self._total_items

    def status(self) -> Dict[str, Any]:
        return {
            "total_items": self._total_items,
            "processed_items": self._processed_items,
            "progress_percentage": self.progress_percentage(),
            "current_operation": self._current_operation,
            "elapsed_time": self.elapsed_time(),
            "estimated_time_remaining": self.estimated_time_remaining(),
            "items_per_second": self.items_per_second(),
            "operation_history": [asdict(record) for record in self._history],
        }

    def formatted_progress(self) -> str:
        remaining = self.estimated_time_remaining()
        return (
            f"[{self.progress_percentage():.1f}%] "
            f"{self._processed_items}/{self._total_items} items | "
            f"{self._current_operation} | "
            f"Elapsed: {format_duration(self.elapsed_time())} | "
            f"Remaining: {format_duration(remaining) if remaining is not None else 'unknown'}"
        )
