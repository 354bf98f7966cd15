from __future__ import annotations

from typing import Optional

from .constants import ErrorKind


class TokenError(Exception):
    """Base class for every failure raised while obtaining a token."""

    kind: Optional[ErrorKind] = None

    def __init__(self, message: str = "An error occurred.", *, error_code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code


class BadRequestError(TokenError):
    """Raised when the identity service rejects the request (HTTP 400)."""

    kind = ErrorKind.BAD_REQUEST

    def __init__(self, body: str) -> None:
        super().__init__(f"Bad request: {body}", error_code="ErrGenerateTokenBadRequest")
        self.body = body


class UnauthorizedError(TokenError):
    """Raised when the client credentials are not accepted (HTTP 401)."""

    kind = ErrorKind.UNAUTHORIZED

    def __init__(self, client_id: str) -> None:
        super().__init__(f"Unauthorized access: {client_id}")
        self.client_id = client_id


class ForbiddenError(TokenError):
    """Raised when the client is not allowed a token (HTTP 403)."""

    kind = ErrorKind.FORBIDDEN

    def __init__(self, client_id: str) -> None:
        super().__init__(f"Forbidden: {client_id}")
        self.client_id = client_id


class InternalError(TokenError):
    """Raised for any other unexpected identity service response."""

    kind = ErrorKind.INTERNAL_ERROR

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message, error_code="ErrGenerateTokenUnexpectedResponseCode")
        self.status_code = status_code


class TransportError(TokenError):
    """Raised when the token request fails before a response is received."""


class TokenTimeoutError(TransportError):
    """Raised when the token request times out. Retryable."""

    kind = ErrorKind.TIMEOUT


class DecodeError(TokenError):
    """Raised when a bearer token cannot be decoded into claims."""


class HandlerClosedError(TokenError):
    """Raised when a token is requested from a closed handler."""
