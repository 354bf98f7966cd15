from __future__ import annotations

import os
from typing import Mapping, Optional

from ..domain.constants import DEFAULT_IAM_SERVICE_URL, DEFAULT_REQUEST_TIMEOUT_SECONDS
from .settings import TokenSettings


def settings_from_env(environ: Optional[Mapping[str, str]] = None) -> TokenSettings:
    env = os.environ if environ is None else environ

    def _bool(key: str, default: bool) -> bool:
        raw = env.get(key)
        if raw is None or not str(raw).strip():
            return default
        return str(raw).strip().lower() in {"1", "true", "yes", "on"}

    def _float(key: str, default: float) -> float:
        raw = env.get(key)
        if not raw:
            return default
        try:
            return float(raw)
        except ValueError as exc:
            raise RuntimeError(f"Invalid value for {key}: {raw!r}") from exc

    access_token = env.get("HPEGL_ACCESS_TOKEN") or None
    user_id = env.get("HPEGL_USER_ID", "")
    user_secret = env.get("HPEGL_USER_SECRET", "")

    if not access_token and not all([user_id, user_secret]):
        missing = [
            n
            for n, v in [
                ("HPEGL_USER_ID", user_id),
                ("HPEGL_USER_SECRET", user_secret),
            ]
            if not v
        ]
        raise RuntimeError(
            f"Missing token settings: {', '.join(missing)} (or set HPEGL_ACCESS_TOKEN)"
        )

    return TokenSettings(
        iam_service_url=env.get("HPEGL_IAM_SERVICE_URL") or DEFAULT_IAM_SERVICE_URL,
        tenant_id=env.get("HPEGL_TENANT_ID", ""),
        user_id=user_id,
        user_secret=user_secret,
        api_vended_service_client=_bool("HPEGL_API_VENDED_SERVICE_CLIENT", True),
        access_token=access_token,
        verify_ssl=_bool("HPEGL_VERIFY_SSL", True),
        request_timeout=_float("HPEGL_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT_SECONDS),
    )
