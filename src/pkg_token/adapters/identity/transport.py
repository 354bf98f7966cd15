from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

import httpx

from ...domain.constants import RETRY_INTERVAL_SECONDS, RETRY_LIMIT

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({
    httpx.codes.INTERNAL_SERVER_ERROR,
    httpx.codes.TOO_MANY_REQUESTS,
})


def is_status_retryable(status_code: int) -> bool:
    return status_code in RETRYABLE_STATUS_CODES


async def do_retries(
    call: Callable[[], Awaitable[httpx.Response]],
    retries: int = RETRY_LIMIT,
    interval: float = RETRY_INTERVAL_SECONDS,
) -> httpx.Response:
    """
    Invoke `call`, retrying on 500 / 429 responses.

    Errors raised before a response exists propagate immediately. Any other
    status, or the last retryable one once `retries` is used up, is returned
    to the caller unchanged.
    """
    while True:
        response = await call()
        if not is_status_retryable(response.status_code) or retries <= 0:
            return response

        logger.info(
            "token request returned %d, retrying in %.1fs (%d left)",
            response.status_code,
            interval,
            retries,
        )
        await asyncio.sleep(interval)
        retries -= 1
