"""Bounded retry with exponential backoff for external capability calls."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from app.config.settings import ScoringConfig

logger = logging.getLogger("app.pipelines.scoring")

T = TypeVar("T")

Sleeper = Callable[[float], Awaitable[None]]


class RetryExhaustedError(RuntimeError):
    """Raised when every attempt of an operation failed."""

    def __init__(self, label: str, attempts: int, last_error: BaseException) -> None:
        super().__init__(f"{label} failed after {attempts} attempts: {last_error}")
        self.label = label
        self.attempts = attempts
        self.last_error = last_error


@dataclass(frozen=True)
class RetryPolicy:
    """Fixed attempt budget; the delay before retry ``n`` is ``base * factor ** (n - 1)``."""

    max_attempts: int = 3
    base_delay_seconds: float = 1.0
    backoff_factor: float = 2.0

    @classmethod
    def from_config(cls, config: ScoringConfig) -> "RetryPolicy":
        return cls(
            max_attempts=config.max_attempts,
            base_delay_seconds=config.base_delay_ms / 1000,
            backoff_factor=config.backoff_factor,
        )

    def delays(self) -> tuple[float, ...]:
        """Sleeps between attempts; there is none after the final attempt."""
        return tuple(
            self.base_delay_seconds * self.backoff_factor ** index
            for index in range(max(self.max_attempts - 1, 0))
        )


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    *,
    label: str,
    sleep: Sleeper = asyncio.sleep,
    on_retry: Optional[Callable[[int, BaseException], None]] = None,
) -> T:
    """Run ``operation`` until it succeeds or the policy's attempts are spent.

    Attempts run sequentially. The last failure is attached to the raised
    ``RetryExhaustedError``.
    """

    delays = policy.delays()
    attempts = max(policy.max_attempts, 1)

    for attempt in range(1, attempts + 1):
        try:
            return await operation()
        except Exception as exc:
            if attempt == attempts:
                raise RetryExhaustedError(label, attempts, exc) from exc
            delay = delays[attempt - 1]
            logger.warning(
                "%s attempt %s/%s failed: %s. Retrying after %sms",
                label,
                attempt,
                attempts,
                exc,
                int(delay * 1000),
            )
            if on_retry is not None:
                on_retry(attempt, exc)
            await sleep(delay)


__all__ = ["RetryExhaustedError", "RetryPolicy", "Sleeper", "retry_async"]
