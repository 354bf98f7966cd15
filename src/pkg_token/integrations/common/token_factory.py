from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Dict, Optional

import httpx

from ...adapters.identity.identity_token import IdentityTokenGenerator
from ...adapters.identity.issuer_token import IssuerTokenGenerator
from ...adapters.identity.static_token import StaticTokenGenerator
from ...adapters.jwt.claims_decoder import UnverifiedClaimsDecoder
from ...application.handler import TokenHandler
from ...application.retrieve import TokenRetrieveFunc, new_token_retrieve_func
from ...config.settings import TokenSettings
from ...domain.constants import TOKEN_RETRIEVE_FUNCTION_KEY
from ...domain.entities import Credential
from ...domain.ports import TokenGenerator


@dataclass(slots=True)
class TokenDependencies:
    """
    Framework-agnostic token facade.

    Service clients only ever see `retrieve`; the handler and generator are
    kept here so the owner can shut them down.
    """

    handler: TokenHandler
    generator: TokenGenerator
    retrieve_func: TokenRetrieveFunc

    async def retrieve(self, cancel: Optional[asyncio.Event] = None) -> str:
        return await self.retrieve_func(cancel)

    def provider_meta(self) -> Dict[str, TokenRetrieveFunc]:
        """Mapping passed down to service client constructors."""
        return {TOKEN_RETRIEVE_FUNCTION_KEY: self.retrieve_func}

    async def aclose(self) -> None:
        await self.handler.close()
        await self.generator.aclose()


def create_token_generator(
        settings: TokenSettings,
        *,
        client: Optional[httpx.AsyncClient] = None,
) -> TokenGenerator:
    """
    Pick the generator for `settings`:
    - a passed-in token short-circuits generation
    - API-vended service clients use the form-encoded issuer flow
    - everything else uses the JSON identity flow
    """
    if settings.access_token:
        return StaticTokenGenerator(settings.access_token)

    generator_cls = (
        IssuerTokenGenerator if settings.api_vended_service_client else IdentityTokenGenerator
    )
    return generator_cls(
        settings.service_url,
        client=client,
        timeout=settings.request_timeout,
        verify_ssl=settings.verify_ssl,
    )


def create_token_dependencies(
        settings: TokenSettings,
        *,
        generator: Optional[TokenGenerator] = None,
        client: Optional[httpx.AsyncClient] = None,
) -> TokenDependencies:
    """
    High-level factory: TokenSettings -> TokenDependencies.

    - builds (or accepts) a TokenGenerator
    - wires it with the unverified claims decoder into a TokenHandler
    - returns the facade exposing the retrieve function
    """
    generator = generator or create_token_generator(settings, client=client)

    credential = Credential(
        tenant_id=settings.tenant_id,
        client_id=settings.user_id,
        client_secret=settings.user_secret,
    )
    handler = TokenHandler(credential, generator, UnverifiedClaimsDecoder())

    return TokenDependencies(
        handler=handler,
        generator=generator,
        retrieve_func=new_token_retrieve_func(handler),
    )
