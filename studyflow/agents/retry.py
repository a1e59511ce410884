# studyflow/agents/retry.py
"""
Bounded exponential-backoff retry for model calls.

Only transient overload (HTTP 503 / "overloaded") is retried. Anything else,
including malformed output, propagates on the first failure.
"""
import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)

OVERLOAD_STATUS = 503


def _status_codes(error: BaseException) -> list[object]:
    codes = [getattr(error, attr, None) for attr in ("status", "code", "status_code")]
    # httpx.HTTPStatusError / openai.APIStatusError keep it on the response
    response = getattr(error, "response", None)
    if response is not None:
        codes.append(getattr(response, "status_code", None))
    return codes


def is_transient_overload(error: BaseException) -> bool:
    if OVERLOAD_STATUS in _status_codes(error):
        return True
    message = str(error).lower()
    return "503" in message or "overloaded" in message


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    initial_delay_ms: int = 1000,
    *,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> T:
    delay_ms = initial_delay_ms

    for attempt in range(1, max_attempts + 1):
        try:
            return await operation()
        except Exception as e:
            if not is_transient_overload(e):
                raise
            if attempt >= max_attempts:
                logger.error("Operation failed after %d attempts due to 503/overloaded: %s", max_attempts, e)
                raise

            logger.warning(
                "Attempt %d/%d failed with 503/overloaded. Retrying in %dms...",
                attempt, max_attempts, delay_ms,
            )
            await sleep(delay_ms / 1000)
            delay_ms *= 2

    raise RuntimeError("with_retry requires max_attempts >= 1")
