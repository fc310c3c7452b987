"""
Retry policy for calls to the language model API.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable

from ..common.errors import LLMRequestError

logger = logging.getLogger(__name__)


def is_retryable_error(error: Exception) -> bool:
    """Rate limits, server errors and transport failures are worth retrying."""
    return isinstance(error, LLMRequestError) and error.retryable


@dataclass
class RetryPolicy:
    """Fixed-delay retry around a fallible call."""
    max_attempts: int = 3
    delay_seconds: float = 2.0
    is_retryable: Callable[[Exception], bool] = is_retryable_error
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def call(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """
        Call func, retrying retryable errors.

        Non-retryable errors propagate immediately; the last retryable error
        propagates once max_attempts calls have failed.
        """
        attempts = max(1, self.max_attempts)
        for attempt in range(1, attempts + 1):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                if attempt >= attempts or not self.is_retryable(e):
                    raise
                logger.warning(f"Attempt {attempt}/{attempts} failed: {e}; retrying in {self.delay_seconds}s")
                self.sleep(self.delay_seconds)
