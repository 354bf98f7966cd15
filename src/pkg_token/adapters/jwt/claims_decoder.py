import binascii
import json
import logging
from typing import Any, Dict

from jwt.utils import base64url_decode

from ...domain.exceptions import DecodeError
from ...domain.ports import ClaimsDecoder
from ...domain.value_objects import Claims

logger = logging.getLogger(__name__)


class UnverifiedClaimsDecoder(ClaimsDecoder):
    """
    Adapter implementing ClaimsDecoder by reading the JWT payload segment.

    The signature is never checked: the token was just issued to us by the
    identity service and is only inspected for its expiry.
    """

    def decode(self, token: str) -> Claims:
        payload = self._parse_payload(token)
        try:
            return Claims.from_payload(payload)
        except (TypeError, ValueError) as exc:
            raise DecodeError(f"oidc: failed to unmarshal claims: {exc}") from exc

    @staticmethod
    def _parse_payload(token: str) -> Dict[str, Any]:
        parts = token.split(".")
        if len(parts) < 2:
            raise DecodeError(f"oidc: malformed jwt, expected 3 parts got {len(parts)}")

        try:
            raw = base64url_decode(parts[1])
        except (binascii.Error, ValueError) as exc:
            raise DecodeError(f"oidc: malformed jwt payload: {exc}") from exc

        try:
            payload = json.loads(raw)
        except ValueError as exc:
            logger.error("oidc: failed to unmarshal claims: %s", exc)
            raise DecodeError(f"oidc: failed to unmarshal claims: {exc}") from exc

        if not isinstance(payload, dict):
            raise DecodeError("oidc: failed to unmarshal claims: payload is not an object")

        return payload


def decode_access_token(token: str) -> Claims:
    """Decode a bearer token offline into Claims."""
    return UnverifiedClaimsDecoder().decode(token)
