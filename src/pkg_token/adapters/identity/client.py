from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ...domain.constants import (
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    RETRY_INTERVAL_SECONDS,
    RETRY_LIMIT,
)
from ...domain.exceptions import InternalError, TokenTimeoutError, TransportError
from ...domain.ports import TokenGenerator
from .status import check_response
from .transport import do_retries

logger = logging.getLogger(__name__)


class BaseTokenClient(TokenGenerator):
    """
    Shared httpx plumbing for the client-credentials token flows.

    - POSTs to `{identity_service_url}/v1/token`
    - retries 500 / 429 responses via `do_retries`
    - maps httpx failures and error statuses to domain exceptions

    Subclasses only build the request body and parse the response body.
    """

    def __init__(
        self,
        identity_service_url: str,
        *,
        client: Optional[httpx.AsyncClient] = None,
        retries: int = RETRY_LIMIT,
        retry_interval: float = RETRY_INTERVAL_SECONDS,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS,
        verify_ssl: bool = True,
    ) -> None:
        self._token_url = f"{identity_service_url.strip().rstrip('/')}/v1/token"
        self._retries = retries
        self._retry_interval = retry_interval
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout, verify=verify_ssl)

    @property
    def token_url(self) -> str:
        return self._token_url

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------ #
    # Port implementation
    # ------------------------------------------------------------------ #

    async def generate_token(self, tenant_id: str, client_id: str, client_secret: str) -> str:
        request_kwargs = self._build_request(tenant_id, client_id, client_secret)

        try:
            response = await do_retries(
                lambda: self._client.post(self._token_url, **request_kwargs),
                retries=self._retries,
                interval=self._retry_interval,
            )
        except httpx.TimeoutException as exc:
            raise TokenTimeoutError(f"Token request to {self._token_url} timed out: {exc}") from exc
        except httpx.RequestError as exc:
            raise TransportError(f"Token request to {self._token_url} failed: {exc}") from exc
        except httpx.InvalidURL as exc:
            raise TransportError(f"Invalid token URL {self._token_url}: {exc}") from exc

        check_response(response, client_id)

        try:
            payload = response.json()
        except ValueError as exc:
            raise InternalError(f"Invalid token response: {exc}", status_code=response.status_code) from exc

        access_token = self._parse_access_token(payload)
        if not access_token:
            raise InternalError("Token response did not contain an access_token", status_code=response.status_code)

        logger.debug("obtained token for client %s from %s", client_id, self._token_url)
        return access_token

    # ------------------------------------------------------------------ #
    # Flow specifics
    # ------------------------------------------------------------------ #

    def _build_request(self, tenant_id: str, client_id: str, client_secret: str) -> Dict[str, Any]:
        raise NotImplementedError

    def _parse_access_token(self, payload: Any) -> str:
        raise NotImplementedError
