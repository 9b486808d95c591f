"""Timing utilities for request monitoring."""
import time
from app.utils.logging import log_structured


class Timer:
    """Context manager for timing code blocks."""

    def __init__(self, operation: str):
        """
        Initialize timer.

        Args:
            operation: Name of the operation being timed
        """
        self.operation = operation
        self.start = None
        self.elapsed = None

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.elapsed = time.perf_counter() - self.start
        log_structured(
            "info",
            f"Operation {self.operation} {'failed' if exc_type else 'completed'}",
            operation=self.operation,
            elapsed_seconds=round(self.elapsed, 4)
        )
