"""
Exponential backoff retry for remote calls.

The analysis core never touches the network. Collaborators that ship its
output to generation services or the document store wrap those calls in a
:class:`RetryPolicy`::

    policy = RetryPolicy(max_attempts=3, base_seconds=1.0)
    song = policy.call(generate_music, result.summary, lyrics)

or decorate them with :func:`with_retry`.
"""

from __future__ import annotations

import functools
import logging
import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

# Transient failures retried by default
_DEFAULT_RETRYABLE: tuple[type[Exception], ...] = (
    OSError,
    TimeoutError,
    ConnectionError,
)


@dataclass(frozen=True)
class RetryPolicy:
    """
    Retry schedule with jittered exponential backoff.

    Attempt ``n`` (1-based) that fails waits
    ``min(base_seconds * 2 ** (n - 1), max_seconds)`` seconds, scaled by a
    random factor in ``[1 - jitter, 1 + jitter]``, before the next attempt.

    Attributes:
        max_attempts: Total attempts including the first try.
        base_seconds: Wait after the first failure.
        max_seconds: Cap on a single wait.
        jitter: Relative jitter; 0 disables it.
        exceptions: Exception types that trigger a retry. Anything else
            propagates immediately.
    """

    max_attempts: int = 3
    base_seconds: float = 1.0
    max_seconds: float = 30.0
    jitter: float = 0.25
    exceptions: tuple[type[Exception], ...] = _DEFAULT_RETRYABLE
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.base_seconds < 0 or self.max_seconds < 0:
            raise ValueError("base_seconds and max_seconds must be non-negative")
        if not 0 <= self.jitter < 1:
            raise ValueError(f"jitter must be in [0, 1), got {self.jitter}")

    def delay(self, attempt: int) -> float:
        """Wait in seconds after failed attempt number ``attempt``."""
        wait = min(self.base_seconds * (2 ** (attempt - 1)), self.max_seconds)
        if self.jitter:
            wait *= 1 + random.uniform(-self.jitter, self.jitter)  # noqa: S311
        return wait

    def call(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """
        Call ``func`` until it succeeds or the attempts run out.

        Raises:
            RuntimeError: After the last attempt fails, chained from the
                final exception.
        """
        name = getattr(func, "__name__", repr(func))
        last_exc: Exception | None = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                return func(*args, **kwargs)
            except self.exceptions as exc:
                last_exc = exc
                if attempt == self.max_attempts:
                    break
                wait = self.delay(attempt)
                logger.warning(
                    "retry: %s attempt %d/%d failed (%s), retrying in %.2fs",
                    name,
                    attempt,
                    self.max_attempts,
                    exc,
                    wait,
                )
                self.sleep(wait)
        raise RuntimeError(f"{name} failed after {self.max_attempts} attempts") from last_exc


def with_retry(policy: RetryPolicy | None = None, **overrides: Any) -> Callable[[F], F]:
    """
    Decorator form of :meth:`RetryPolicy.call`.

    Args:
        policy: Schedule to use; defaults to ``RetryPolicy()``.
        **overrides: Field overrides applied on top of ``policy``.

    Example::

        @with_retry(max_attempts=4, exceptions=(ConnectionError,))
        def save(document: dict) -> str:
            ...
    """
    base = policy or RetryPolicy()
    if overrides:
        base = replace(base, **overrides)

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            return base.call(func, *args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator
