from __future__ import annotations

from ...domain.ports import TokenGenerator


class StaticTokenGenerator(TokenGenerator):
    """
    Hands back a token that was passed in by configuration.

    No request is ever made; the credentials are ignored.
    """

    def __init__(self, token: str) -> None:
        self._token = token

    async def generate_token(self, tenant_id: str, client_id: str, client_secret: str) -> str:
        return self._token

    async def aclose(self) -> None:
        return None
