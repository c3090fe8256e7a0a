# resume/ai/retry.py
import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Type

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
)


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded exponential backoff for calls to the rewrite service

    The delay after failed attempt n is base_delay * 2 ** (n - 1), capped
    at max_delay. Every attempt is also bounded by attempt_timeout seconds.
    """
    max_attempts: int = 3
    base_delay: float = 1.0
    max_delay: float = 30.0
    attempt_timeout: float = 60.0

    def delay_for(self, attempt_number: int) -> float:
        """Seconds to wait after the given (1-based) failed attempt"""
        if attempt_number < 1:
            raise ValueError("attempt_number starts at 1")
        return max(0.0, min(self.base_delay * 2 ** (attempt_number - 1), self.max_delay))

    def wait_after(self, retry_state: RetryCallState) -> float:
        """tenacity wait strategy backed by `delay_for`"""
        return self.delay_for(retry_state.attempt_number)

    def retrying(
        self,
        retry_on: Tuple[Type[BaseException], ...],
        logger: Optional[logging.Logger] = None
    ) -> AsyncRetrying:
        """
        Build a tenacity retrier implementing this policy

        Args:
            retry_on: Exception types that count as retryable failures
            logger: Logger used for the before-sleep warning

        Returns:
            AsyncRetrying that re-raises the last error when attempts run out
        """
        kwargs = {}
        if logger is not None:
            kwargs["before_sleep"] = before_sleep_log(logger, logging.WARNING)

        return AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=self.wait_after,
            retry=retry_if_exception_type(retry_on),
            reraise=True,
            **kwargs
        )
