"""
Timing Utilities for Latency Instrumentation

Logs execution times of the AI call, normalization and fallback steps
in a single ``[TIMING]`` format.
"""

import logging
import time
from contextlib import asynccontextmanager, contextmanager
from typing import Optional

logger = logging.getLogger(__name__)


def log_timing(component: str, action: str, duration_ms: Optional[float] = None):
    """Log a timing event in standard format."""
    if duration_ms is not None:
        logger.info("[TIMING] %s: %s — duration=%.0fms", component, action, duration_ms)
    else:
        logger.info("[TIMING] %s: %s", component, action)


@asynccontextmanager
async def async_timer(component: str, action: str = "OPERATION"):
    """Async context manager for timing operations."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration_ms = (time.perf_counter() - start) * 1000
        log_timing(component, action, duration_ms)


class StepTimer:
    """
    Utility class for timing multiple steps of one request.

    Usage:
        timer = StepTimer("forecast")
        with timer.step("normalize"):
            normalize(raw)
        timer.summary()
    """

    def __init__(self, component: str):
        self.component = component
        self.steps: dict[str, float] = {}
        self.start_time = time.perf_counter()

    @contextmanager
    def step(self, step_name: str):
        """Time a single step."""
        start = time.perf_counter()
        try:
            yield
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            self.steps[step_name] = duration_ms
            log_timing(self.component, step_name, duration_ms)

    def summary(self) -> float:
        """Log total elapsed time since construction."""
        total_ms = (time.perf_counter() - self.start_time) * 1000
        log_timing(self.component, "TOTAL", total_ms)
        return total_ms
