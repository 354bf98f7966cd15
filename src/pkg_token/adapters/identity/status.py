from __future__ import annotations

from typing import Optional

import httpx

from ...domain.constants import ErrorKind
from ...domain.exceptions import (
    BadRequestError,
    ForbiddenError,
    InternalError,
    UnauthorizedError,
)


def classify_status(status_code: int) -> Optional[ErrorKind]:
    """Map an identity service status code to an ErrorKind (None on success)."""
    if status_code == httpx.codes.OK:
        return None
    if status_code == httpx.codes.BAD_REQUEST:
        return ErrorKind.BAD_REQUEST
    if status_code == httpx.codes.UNAUTHORIZED:
        return ErrorKind.UNAUTHORIZED
    if status_code == httpx.codes.FORBIDDEN:
        return ErrorKind.FORBIDDEN
    return ErrorKind.INTERNAL_ERROR


def check_response(response: httpx.Response, client_id: str) -> None:
    """
    Raise the typed error matching a non-200 token response.

    Raises:
        BadRequestError (carries the raw body)
        UnauthorizedError / ForbiddenError (carry the client id)
        InternalError (carries the status code)
    """
    kind = classify_status(response.status_code)
    if kind is None:
        return
    if kind is ErrorKind.BAD_REQUEST:
        raise BadRequestError(response.text)
    if kind is ErrorKind.UNAUTHORIZED:
        raise UnauthorizedError(client_id)
    if kind is ErrorKind.FORBIDDEN:
        raise ForbiddenError(client_id)
    raise InternalError(
        f"Unexpected status code {response.status_code}",
        status_code=response.status_code,
    )
