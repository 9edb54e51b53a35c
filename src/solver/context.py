"""
Search Context Module - Budgets, cancellation and progress for one search.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Optional


@dataclass
class SearchContext:
    """
    Limits and hooks shared with a running search.

    Attributes:
        max_steps: Maximum values tried before giving up (None = unbounded)
        timeout_sec: Maximum wall-clock seconds (None = unbounded)
        cancel_flag: Threading event for cancellation from another thread
        start_time: When computation started
        progress_callback: Optional callback receiving (steps, message)
        progress_interval: Steps between progress reports
    """
    max_steps: Optional[int] = None
    timeout_sec: Optional[float] = None
    cancel_flag: threading.Event = field(default_factory=threading.Event)
    start_time: float = field(default_factory=time.time)
    progress_callback: Optional[Callable[[int, str], None]] = None
    progress_interval: int = 10000

    def restart(self) -> None:
        """Reset the clock so the context can be reused for another search."""
        self.start_time = time.time()

    def limit_reason(self, steps: int) -> Optional[str]:
        """
        Check whether the search must stop.

        Args:
            steps: Values tried so far

        Returns:
            "cancelled", "steps" or "timeout" if a limit fired, else None
        """
        if self.cancel_flag.is_set():
            return "cancelled"
        if self.max_steps is not None and steps > self.max_steps:
            return "steps"
        if self.timeout_sec is not None and self.elapsed_time() >= self.timeout_sec:
            return "timeout"
        return None

    def report_progress(self, steps: int, message: str = "") -> None:
        """
        Report progress to the caller.

        Args:
            steps: Values tried so far
            message: Optional status message
        """
        if self.progress_callback:
            self.progress_callback(steps, message)

    def elapsed_time(self) -> float:
        """
        Get seconds elapsed since computation started.

        Returns:
            Elapsed time in seconds
        """
        return time.time() - self.start_time
