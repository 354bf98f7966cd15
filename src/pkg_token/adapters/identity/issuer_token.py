from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

from .client import BaseTokenClient


@dataclass(frozen=True, slots=True)
class IssuerTokenResponse:
    token_type: str = ""
    expires_in: int = 0
    access_token: str = ""
    scope: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "IssuerTokenResponse":
        return cls(
            token_type=payload.get("token_type") or "",
            expires_in=int(payload.get("expires_in") or 0),
            access_token=payload.get("access_token") or "",
            scope=payload.get("scope") or "",
        )


class IssuerTokenGenerator(BaseTokenClient):
    """
    Client-credentials flow for API-vended service clients.

    Sends a form-encoded body scoped to the tenant.
    """

    scope = "hpe-tenant"

    def _build_request(self, tenant_id: str, client_id: str, client_secret: str) -> Dict[str, Any]:
        return {
            "data": {
                "client_id": client_id,
                "client_secret": client_secret,
                "grant_type": "client_credentials",
                "scope": self.scope,
            },
            "headers": {"Content-Type": "application/x-www-form-urlencoded"},
        }

    def _parse_access_token(self, payload: Any) -> str:
        if not isinstance(payload, Mapping):
            return ""
        return IssuerTokenResponse.from_payload(payload).access_token
