from __future__ import annotations

import asyncio
from typing import Protocol

from .entities import Result
from .value_objects import Claims


class TokenGenerator(Protocol):
    """
    Port for exchanging client credentials for a fresh bearer token.

    Implementations live in the adapters layer (issuer / identity flows).
    """

    async def generate_token(self, tenant_id: str, client_id: str, client_secret: str) -> str:
        """
        Raises:
          - TokenTimeoutError (retryable)
          - TransportError
          - BadRequestError / UnauthorizedError / ForbiddenError / InternalError
        """
        ...

    async def aclose(self) -> None:
        ...


class ClaimsDecoder(Protocol):
    """
    Port for reading claims out of a bearer token without verifying it.
    """

    def decode(self, token: str) -> Claims:
        """Raises DecodeError on a malformed token."""
        ...


class TokenChannel(Protocol):
    """
    Port implemented by a token handler: hand out one pending Result per call.
    """

    def request(self) -> "asyncio.Future[Result]":
        ...
