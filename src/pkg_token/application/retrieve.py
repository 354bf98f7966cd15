from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

from ..domain.ports import TokenChannel

TokenRetrieveFunc = Callable[[Optional[asyncio.Event]], Awaitable[str]]


def new_token_retrieve_func(channel: TokenChannel) -> TokenRetrieveFunc:
    """
    Build the blocking accessor handed to service clients.

    The returned coroutine function waits for the next Result from
    `channel` and returns its token (or raises its error). If `cancel` is
    set before a Result arrives it returns "" instead; only this caller's
    request is withdrawn, the handler keeps serving everyone else.
    """

    async def retrieve(cancel: Optional[asyncio.Event] = None) -> str:
        if cancel is not None and cancel.is_set():
            return ""

        waiter = channel.request()
        if cancel is None:
            result = await waiter
            return result.unwrap()

        cancelled = asyncio.ensure_future(cancel.wait())
        try:
            await asyncio.wait({waiter, cancelled}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancelled.cancel()
            if not waiter.done():
                waiter.cancel()

        if waiter.cancelled():
            return ""
        return waiter.result().unwrap()

    return retrieve
