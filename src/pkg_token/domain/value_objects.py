# src/pkg_token/domain/value_objects.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


def _normalize_subject(raw_subject: str, user_id: str, client_id: str, keycloak_client_id: str) -> str:
    """
    Prefix the raw `sub` claim with the principal type.

    User tokens carry `uid`, client tokens carry `cid` (or `clientId` for
    Keycloak). Tokens with neither are treated as user tokens.
    """
    if user_id:
        return "users/" + user_id
    if client_id or keycloak_client_id:
        return "clients/" + raw_subject
    return "users/" + raw_subject


@dataclass(frozen=True, slots=True)
class Claims:
    """
    Unverified claims read from a bearer token payload.

    Only used for expiry bookkeeping, never for authorization decisions.
    """
    issuer: str = ""
    subject: str = ""
    expiry: int = 0
    issued_at: int = 0
    token_type: str = ""
    nonce: str = ""
    at_hash: str = ""
    client_id: str = ""
    user_id: str = ""
    tenant_id: str = ""
    authorized_party: str = ""
    keycloak_client_id: str = ""
    is_hpe: bool = False

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Claims":
        user_id = str(payload.get("uid") or "")
        client_id = str(payload.get("cid") or "")
        keycloak_client_id = str(payload.get("clientId") or "")

        return cls(
            issuer=str(payload.get("iss") or ""),
            subject=_normalize_subject(
                str(payload.get("sub") or ""),
                user_id,
                client_id,
                keycloak_client_id,
            ),
            expiry=int(payload.get("exp") or 0),
            issued_at=int(payload.get("iat") or 0),
            token_type=str(payload.get("typ") or ""),
            nonce=str(payload.get("nonce") or ""),
            at_hash=str(payload.get("at_hash") or ""),
            client_id=client_id,
            user_id=user_id,
            tenant_id=str(payload.get("tenantId") or ""),
            authorized_party=str(payload.get("azp") or ""),
            keycloak_client_id=keycloak_client_id,
            is_hpe=payload.get("isHPE") is True,
        )

    def seconds_to_expiry(self, now: int) -> int:
        return self.expiry - now
