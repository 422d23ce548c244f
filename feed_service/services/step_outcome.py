"""
Failure boundary for calls to external collaborators.

run_step turns any exception (or an exceeded time budget) into a failed
StepOutcome carrying the step's default value, so callers degrade instead
of aborting.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from feed_service.exceptions import StepTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class StepOutcome(Generic[T]):
    value: T
    ok: bool = True
    error: Optional[str] = None

    @classmethod
    def success(cls, value: T) -> "StepOutcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, default: T, error: str) -> "StepOutcome[T]":
        return cls(value=default, ok=False, error=error)


def run_step(step: str, user_id: str, fn: Callable[[], T], default: T,
             timeout: Optional[float] = None) -> StepOutcome[T]:
    """
    Run fn, returning its value, or default if it raises or exceeds timeout.

    Failures are logged with the step name, user and underlying cause.
    """
    try:
        if timeout is None:
            value = fn()
        else:
            # One worker per call; a timed-out call is left running in its own thread
            executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"feed-{step}")
            try:
                value = executor.submit(fn).result(timeout=timeout)
            except FuturesTimeoutError:
                raise StepTimeoutError(step, timeout)
            finally:
                executor.shutdown(wait=False)
        return StepOutcome.success(value)

    except Exception as e:
        error = f"{step}: {type(e).__name__}: {str(e)}"
        logger.error(
            f"{step} failed for user {user_id}: {type(e).__name__}: {str(e)}",
            extra={
                "step": step,
                "user_id": user_id,
                "error_type": type(e).__name__,
            },
        )
        return StepOutcome.failure(default, error)
