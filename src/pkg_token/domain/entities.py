from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(slots=True)
class Credential:
    """
    Client credentials plus the token cached for them.

    Owned by the refresh worker of a single TokenHandler; nothing else
    reads or writes the cached token.
    """
    tenant_id: str
    client_id: str
    client_secret: str = field(repr=False)

    token: str = field(default="", repr=False)
    expiry: int = 0

    @property
    def has_token(self) -> bool:
        return bool(self.token)

    def store(self, token: str, expiry: int) -> None:
        self.token = token
        self.expiry = expiry


@dataclass(frozen=True, slots=True)
class Result:
    """
    Outcome of one token retrieval, handed to exactly one caller.
    """
    token: str = ""
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> str:
        """Return the token, or raise the error carried by this result."""
        if self.error is not None:
            raise self.error
        return self.token
