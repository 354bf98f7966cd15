from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

from .client import BaseTokenClient


@dataclass(frozen=True, slots=True)
class IdentityTokenResponse:
    token_type: str = ""
    access_token: str = ""
    refresh_token: str = ""
    expiry: str = ""
    expires_in: int = 0
    scope: str = ""
    access_token_only: bool = False

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "IdentityTokenResponse":
        return cls(
            token_type=payload.get("token_type") or "",
            access_token=payload.get("access_token") or "",
            refresh_token=payload.get("refresh_token") or "",
            expiry=payload.get("expiry") or "",
            expires_in=int(payload.get("expires_in") or 0),
            scope=payload.get("scope") or "",
            access_token_only=bool(payload.get("accessTokenOnly") or False),
        )


class IdentityTokenGenerator(BaseTokenClient):
    """
    Client-credentials flow against the identity service (JSON body).
    """

    def _build_request(self, tenant_id: str, client_id: str, client_secret: str) -> Dict[str, Any]:
        return {
            "json": {
                "tenant_id": tenant_id,
                "client_id": client_id,
                "client_secret": client_secret,
                "grant_type": "client_credentials",
            },
            "headers": {"Content-Type": "application/json"},
        }

    def _parse_access_token(self, payload: Any) -> str:
        if not isinstance(payload, Mapping):
            return ""
        return IdentityTokenResponse.from_payload(payload).access_token
