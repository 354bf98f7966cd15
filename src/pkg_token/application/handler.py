from __future__ import annotations

import asyncio
import contextlib
import functools
import logging
import time
from typing import Callable, Optional

from ..domain.constants import RETRY_DEADLINE_SECONDS, RETRY_LIMIT, TIME_TO_TOKEN_EXPIRY
from ..domain.entities import Credential, Result
from ..domain.exceptions import HandlerClosedError, TokenError, TokenTimeoutError
from ..domain.ports import ClaimsDecoder, TokenChannel, TokenGenerator

logger = logging.getLogger(__name__)


def _abandon_attempt(attempt: "asyncio.Task[Result]", waiter: "asyncio.Future[Result]") -> None:
    # The caller gave up: abort its in-flight generation, if any.
    if waiter.cancelled():
        attempt.cancel()


class TokenHandler(TokenChannel):
    """
    Keeps one renewable bearer token for a set of client credentials.

    A single background worker owns the cached Credential. Callers never
    touch it: they enqueue a waiter with `request()` and the worker serves
    waiters one at a time, running `_retrieve_token` for each. So:

    - at most one generation is in flight per handler
    - nothing is generated unless a caller is waiting
    - concurrent callers see a sequence of attempts, never a fan-out

    A caller that cancels its waiter only affects itself. If its attempt is
    in flight, the attempt task (and the HTTP request under it) is cancelled
    and the worker moves on to the next waiter.
    """

    def __init__(
        self,
        credential: Credential,
        generator: TokenGenerator,
        decoder: ClaimsDecoder,
        *,
        retry_limit: int = RETRY_LIMIT,
        expiry_margin: int = TIME_TO_TOKEN_EXPIRY,
        retry_deadline: Optional[float] = RETRY_DEADLINE_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._credential = credential
        self._generator = generator
        self._decoder = decoder
        self._retry_limit = retry_limit
        self._expiry_margin = expiry_margin
        self._retry_deadline = retry_deadline
        self._clock = clock

        self._requests: "asyncio.Queue[asyncio.Future[Result]]" = asyncio.Queue()
        self._worker: Optional["asyncio.Task[None]"] = None
        self._closed = False

    async def __aenter__(self) -> "TokenHandler":
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def start(self) -> None:
        """Start the refresh worker. Must be called with a running loop."""
        if self._closed:
            raise HandlerClosedError("token handler is closed")
        if self._worker is None:
            self._worker = asyncio.get_running_loop().create_task(
                self._run(), name=f"token-refresh-{self._credential.client_id}"
            )

    async def close(self) -> None:
        """Stop the worker and fail every waiter still pending."""
        if self._closed:
            return
        self._closed = True

        if self._worker is not None:
            self._worker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._worker
            self._worker = None

        while not self._requests.empty():
            waiter = self._requests.get_nowait()
            if not waiter.done():
                waiter.set_exception(HandlerClosedError("token handler closed"))

    # ------------------------------------------------------------------ #
    # Port implementation
    # ------------------------------------------------------------------ #

    def request(self) -> "asyncio.Future[Result]":
        """Queue a waiter that the worker completes with the next Result."""
        self.start()
        waiter: "asyncio.Future[Result]" = asyncio.get_running_loop().create_future()
        self._requests.put_nowait(waiter)
        return waiter

    # ------------------------------------------------------------------ #
    # Worker
    # ------------------------------------------------------------------ #

    async def _run(self) -> None:
        logger.debug("token refresh worker started for client %s", self._credential.client_id)
        while True:
            waiter = await self._requests.get()
            if waiter.done():
                continue

            attempt = asyncio.create_task(self._retrieve_token())
            waiter.add_done_callback(functools.partial(_abandon_attempt, attempt))
            try:
                await asyncio.wait({attempt})
            except asyncio.CancelledError:
                attempt.cancel()
                await asyncio.wait({attempt})
                if not waiter.done():
                    waiter.set_exception(HandlerClosedError("token handler closed while retrieving a token"))
                raise

            if attempt.cancelled():
                logger.debug("token retrieval abandoned by its caller")
                continue

            exc = attempt.exception()
            if exc is not None:
                logger.error("unexpected error while retrieving token", exc_info=exc)
                result = Result(error=exc)
            else:
                result = attempt.result()

            if not waiter.done():
                waiter.set_result(result)

    async def _retrieve_token(self) -> Result:
        retries = 0
        started = time.monotonic()
        while True:
            now = int(self._clock())
            try:
                return Result(token=await self._current_token(now))
            except TokenTimeoutError as exc:
                retries += 1
                if retries <= self._retry_limit and not self._deadline_passed(started):
                    logger.warning(
                        "token generation timed out, retrying (%d/%d): %s",
                        retries,
                        self._retry_limit,
                        exc,
                    )
                    continue
                return self._failure(exc, now)
            except TokenError as exc:
                return self._failure(exc, now)

    async def _current_token(self, now: int) -> str:
        cred = self._credential
        if not cred.has_token:
            await self._renew()

        if cred.expiry - now <= self._expiry_margin:
            logger.debug("cached token expires in %ds, renewing", cred.expiry - now)
            await self._renew()

        return cred.token

    async def _renew(self) -> None:
        cred = self._credential
        token = await self._generator.generate_token(cred.tenant_id, cred.client_id, cred.client_secret)
        # decode before caching so a malformed token is never stored
        claims = self._decoder.decode(token)
        cred.store(token, claims.expiry)
        logger.info(
            "generated token for %s, expires in %ds",
            claims.subject,
            claims.seconds_to_expiry(int(self._clock())),
        )

    def _failure(self, exc: TokenError, now: int) -> Result:
        cred = self._credential
        if cred.has_token and cred.expiry > now:
            logger.warning(
                "token renewal failed, serving cached token valid for %ds: %s",
                cred.expiry - now,
                exc,
            )
            return Result(token=cred.token)
        return Result(error=exc)

    def _deadline_passed(self, started: float) -> bool:
        if self._retry_deadline is None:
            return False
        return time.monotonic() - started >= self._retry_deadline
