# tests/test_generators.py
import json
from urllib.parse import parse_qs

import httpx
import pytest

from pkg_token.adapters.identity.identity_token import IdentityTokenGenerator, IdentityTokenResponse
from pkg_token.adapters.identity.issuer_token import IssuerTokenGenerator, IssuerTokenResponse
from pkg_token.adapters.identity.static_token import StaticTokenGenerator
from pkg_token.domain.exceptions import (
    BadRequestError,
    ForbiddenError,
    InternalError,
    TokenTimeoutError,
    TransportError,
    UnauthorizedError,
)

SERVICE_URL = "https://client.greenlake.hpe.com/api/iam/identity/"


def _generator(cls, handler, **kwargs):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return cls(SERVICE_URL, client=client, retry_interval=0, **kwargs), client


def _respond(status_code, body=None, requests=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        if isinstance(body, (dict, list)):
            return httpx.Response(status_code, json=body)
        return httpx.Response(status_code, text=body or "")

    return handler


@pytest.mark.asyncio
async def test_issuer_sends_form_encoded_request():
    requests = []
    generator, _ = _generator(
        IssuerTokenGenerator,
        _respond(200, {"access_token": "abc", "token_type": "Bearer", "expires_in": 3600}, requests),
    )

    assert await generator.generate_token("tenant", "client", "secret") == "abc"

    (request,) = requests
    assert request.method == "POST"
    assert str(request.url) == "https://client.greenlake.hpe.com/api/iam/identity/v1/token"
    assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
    assert parse_qs(request.content.decode()) == {
        "client_id": ["client"],
        "client_secret": ["secret"],
        "grant_type": ["client_credentials"],
        "scope": ["hpe-tenant"],
    }


@pytest.mark.asyncio
async def test_identity_sends_json_request():
    requests = []
    generator, _ = _generator(
        IdentityTokenGenerator,
        _respond(200, {"access_token": "abc", "refresh_token": "r", "accessTokenOnly": True}, requests),
    )

    assert await generator.generate_token("tenant", "client", "secret") == "abc"

    (request,) = requests
    assert request.headers["Content-Type"] == "application/json"
    assert request.url.path == "/api/iam/identity/v1/token"
    assert json.loads(request.content) == {
        "tenant_id": "tenant",
        "client_id": "client",
        "client_secret": "secret",
        "grant_type": "client_credentials",
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("cls", [IssuerTokenGenerator, IdentityTokenGenerator])
@pytest.mark.parametrize(
    "status_code, body, error, message",
    [
        (400, '{"error":"invalid_request"}', BadRequestError, 'Bad request: {"error":"invalid_request"}'),
        (401, "", UnauthorizedError, "Unauthorized access: client"),
        (403, "", ForbiddenError, "Forbidden: client"),
        (404, "", InternalError, "Unexpected status code 404"),
    ],
)
async def test_error_statuses(cls, status_code, body, error, message):
    generator, _ = _generator(cls, _respond(status_code, body))

    with pytest.raises(error) as exc_info:
        await generator.generate_token("tenant", "client", "secret")
    assert str(exc_info.value) == message


@pytest.mark.asyncio
async def test_retryable_status_then_success():
    requests = []
    statuses = iter([500, 429, 200])

    def handler(request):
        requests.append(request)
        return httpx.Response(next(statuses), json={"access_token": "abc"})

    generator, _ = _generator(IssuerTokenGenerator, handler)
    assert await generator.generate_token("tenant", "client", "secret") == "abc"
    assert len(requests) == 3


@pytest.mark.asyncio
async def test_retryable_status_exhausted():
    requests = []
    generator, _ = _generator(IdentityTokenGenerator, _respond(500, "", requests), retries=2)

    with pytest.raises(InternalError, match="500"):
        await generator.generate_token("tenant", "client", "secret")
    assert len(requests) == 3


@pytest.mark.asyncio
async def test_timeout_is_typed():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    generator, _ = _generator(IssuerTokenGenerator, handler)
    with pytest.raises(TokenTimeoutError):
        await generator.generate_token("tenant", "client", "secret")


@pytest.mark.asyncio
async def test_connection_error_is_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    generator, _ = _generator(IdentityTokenGenerator, handler)
    with pytest.raises(TransportError) as exc_info:
        await generator.generate_token("tenant", "client", "secret")
    assert not isinstance(exc_info.value, TokenTimeoutError)


@pytest.mark.asyncio
@pytest.mark.parametrize("body", ["not json", {"token_type": "Bearer"}, ["abc"]])
async def test_unusable_success_body(body):
    generator, _ = _generator(IssuerTokenGenerator, _respond(200, body))
    with pytest.raises(InternalError):
        await generator.generate_token("tenant", "client", "secret")


@pytest.mark.asyncio
async def test_injected_client_is_left_open():
    generator, client = _generator(IssuerTokenGenerator, _respond(200, {"access_token": "abc"}))
    await generator.aclose()
    assert not client.is_closed
    await client.aclose()


@pytest.mark.asyncio
async def test_owned_client_is_closed():
    generator = IdentityTokenGenerator("https://iam.example.com")
    assert generator.token_url == "https://iam.example.com/v1/token"
    await generator.aclose()
    assert generator._client.is_closed


@pytest.mark.asyncio
async def test_static_token_generator():
    generator = StaticTokenGenerator("passed-in")
    assert await generator.generate_token("", "", "") == "passed-in"
    await generator.aclose()


def test_response_models():
    issuer = IssuerTokenResponse.from_payload({"access_token": "a", "expires_in": 60, "scope": "hpe-tenant"})
    assert issuer == IssuerTokenResponse(access_token="a", expires_in=60, scope="hpe-tenant")

    identity = IdentityTokenResponse.from_payload(
        {"access_token": "a", "refresh_token": "r", "expiry": "2030-01-01T00:00:00Z", "accessTokenOnly": True}
    )
    assert identity.refresh_token == "r"
    assert identity.expiry == "2030-01-01T00:00:00Z"
    assert identity.access_token_only


@pytest.mark.asyncio
async def test_invalid_service_url_is_transport_error():
    client = httpx.AsyncClient(transport=httpx.MockTransport(_respond(200, {"access_token": "abc"})))
    generator = IssuerTokenGenerator("http://[::1", client=client, retry_interval=0)

    with pytest.raises(TransportError, match="Invalid token URL"):
        await generator.generate_token("tenant", "client", "secret")
    await client.aclose()
