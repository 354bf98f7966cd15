from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..domain.constants import DEFAULT_IAM_SERVICE_URL, DEFAULT_REQUEST_TIMEOUT_SECONDS


@dataclass(slots=True)
class TokenSettings:
    """
    Identity service connection + client credential settings.

    Host code decides how to construct this (env, provider config, etc.).
    """
    iam_service_url: str = DEFAULT_IAM_SERVICE_URL
    tenant_id: str = ""
    user_id: str = ""
    user_secret: str = field(default="", repr=False)

    # Form-encoded issuer flow when True, JSON identity flow otherwise
    api_vended_service_client: bool = True

    # A token passed in directly; disables generation when set
    access_token: Optional[str] = field(default=None, repr=False)

    verify_ssl: bool = True
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT_SECONDS

    @property
    def service_url(self) -> str:
        return self.iam_service_url.strip().rstrip("/")
