"""Retry and logging helpers for calls that leave the process.

The engine in :mod:`core` is pure and never needs these. They exist for
the code around it: the mutation gateway behind a resize commit and the
read-model adapters.

Example:
    >>> from loadplan.error_handling import with_retry
    >>>
    >>> @with_retry(max_attempts=3, backoff_factor=1.5)
    ... def save_dates(loading_id, start, end):
    ...     return gateway.update_loading_dates(loading_id, start, end)
"""

import functools
import logging
import time
from collections.abc import Iterator
from typing import Any, Callable, ParamSpec, TypeVar

from loadplan.exceptions import RetryExhaustedError, ServerError

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")

# Lower-cased fragments of error messages that point at a flaky transport
TRANSIENT_PATTERNS = (
    "timeout",
    "timed out",
    "connection",
    "network",
    "temporary",
    "unavailable",
    "too many requests",
    "broken pipe",
)


def is_transient_error(error: Exception) -> bool:
    """
    Tell whether *error* is worth another attempt.

    Built-in connection and timeout errors and :class:`ServerError` always
    are; anything else only when its message matches ``TRANSIENT_PATTERNS``.
    """
    if isinstance(error, (ConnectionError, TimeoutError, ServerError)):
        return True

    text = str(error).lower()
    return any(pattern in text for pattern in TRANSIENT_PATTERNS)


def backoff_delays(
    initial_delay: float, backoff_factor: float, max_delay: float
) -> Iterator[float]:
    """Yield an endless, capped geometric series of sleep intervals."""
    delay = initial_delay
    while True:
        yield min(delay, max_delay)
        delay *= backoff_factor


def with_retry(
    max_attempts: int = 3,
    backoff_factor: float = 1.5,
    initial_delay: float = 0.5,
    max_delay: float = 10.0,
    retry_on: tuple[type[Exception], ...] | None = None,
    log_attempts: bool = True,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """
    Retry the decorated callable with exponential backoff.

    With ``retry_on`` only those exception types are retried; without it
    :func:`is_transient_error` decides. Any other error propagates at once.
    Running out of attempts raises :class:`RetryExhaustedError` chained to
    the last failure.

    Args:
        max_attempts: Total number of calls, the first one included.
        backoff_factor: Growth of the delay after each failed attempt.
        initial_delay: Seconds to wait after the first failure.
        max_delay: Upper bound for a single wait.
        retry_on: Exception types to retry instead of the transient check.
        log_attempts: Log each failed attempt.
    """

    def retryable(error: Exception) -> bool:
        if retry_on is not None:
            return isinstance(error, retry_on)
        return is_transient_error(error)

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        name = getattr(func, "__name__", "unknown")

        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            delays = backoff_delays(initial_delay, backoff_factor, max_delay)
            last_error: Exception | None = None

            for attempt in range(1, max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except Exception as exc:
                    if not retryable(exc):
                        raise
                    last_error = exc

                if attempt == max_attempts:
                    if log_attempts:
                        logger.warning(f"{name} gave up after {attempt} attempt(s): {last_error}")
                    break

                delay = next(delays)
                if log_attempts:
                    logger.info(
                        f"{name} attempt {attempt}/{max_attempts} failed: {last_error}. "
                        f"Retrying in {delay:.1f}s..."
                    )
                time.sleep(delay)

            raise RetryExhaustedError(
                f"All {max_attempts} retry attempts exhausted",
                details={"function": name, "last_error": str(last_error)},
            ) from last_error

        return wrapper

    return decorator


def log_error(
    error: Exception,
    context: str,
    include_traceback: bool = False,
    extra: dict[str, Any] | None = None,
) -> None:
    """
    Log *error* as ``"<context>: <Type> - <message> (key=value, ...)"``.

    ``include_traceback`` switches to ``logger.exception``; call it from an
    ``except`` block in that case.
    """
    message = f"{context}: {type(error).__name__} - {error}"
    if extra:
        message += " (" + ", ".join(f"{key}={value}" for key, value in extra.items()) + ")"

    if include_traceback:
        logger.exception(message)
    else:
        logger.error(message)


class ErrorContext:
    """
    Log any exception raised inside the block, then re-raise or swallow it.

    Example:
        >>> with ErrorContext("loading capacity", reraise=False, default_value={}) as ctx:
        ...     loaded = repository.load_capacities()
        >>> capacities = ctx.get_value(loaded if ctx.error is None else None)
    """

    def __init__(
        self,
        context: str,
        reraise: bool = True,
        log_traceback: bool = False,
        default_value: Any = None,
    ):
        self.context = context
        self.reraise = reraise
        self.log_traceback = log_traceback
        self.default_value = default_value
        self.error: Exception | None = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if not isinstance(exc_val, Exception):
            return False
        self.error = exc_val
        log_error(exc_val, self.context, include_traceback=self.log_traceback)
        return not self.reraise

    def get_value(self, success_value: Any = None) -> Any:
        """Return *success_value*, or ``default_value`` when the block failed."""
        return self.default_value if self.error is not None else success_value


__all__ = [
    "backoff_delays",
    "is_transient_error",
    "with_retry",
    "log_error",
    "ErrorContext",
]
