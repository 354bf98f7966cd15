"""
pkg_token

Background credential refresh for identity service bearer tokens: one
cached token per handler, renewed shortly before it expires, handed out to
any number of concurrent callers through a single worker.
"""

__version__ = "0.1.0"

from .domain.entities import Credential, Result
from .domain.constants import ErrorKind, TIME_TO_TOKEN_EXPIRY, TOKEN_RETRIEVE_FUNCTION_KEY
from .domain.exceptions import (
    TokenError,
    BadRequestError,
    UnauthorizedError,
    ForbiddenError,
    InternalError,
    TransportError,
    TokenTimeoutError,
    DecodeError,
    HandlerClosedError,
)
from .domain.value_objects import Claims
from .domain.ports import TokenGenerator, ClaimsDecoder, TokenChannel

from .application.handler import TokenHandler
from .application.retrieve import TokenRetrieveFunc, new_token_retrieve_func

from .adapters.identity.issuer_token import IssuerTokenGenerator
from .adapters.identity.identity_token import IdentityTokenGenerator
from .adapters.identity.static_token import StaticTokenGenerator
from .adapters.jwt.claims_decoder import UnverifiedClaimsDecoder, decode_access_token

from .config.settings import TokenSettings
from .config.env import settings_from_env
from .integrations.common.token_factory import (
    TokenDependencies,
    create_token_dependencies,
    create_token_generator,
)

__all__ = [
    "__version__",
    # domain core
    "Credential",
    "Result",
    "Claims",
    "ErrorKind",
    "TIME_TO_TOKEN_EXPIRY",
    "TOKEN_RETRIEVE_FUNCTION_KEY",
    "TokenGenerator",
    "ClaimsDecoder",
    "TokenChannel",
    # exceptions
    "TokenError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "InternalError",
    "TransportError",
    "TokenTimeoutError",
    "DecodeError",
    "HandlerClosedError",
    # application
    "TokenHandler",
    "TokenRetrieveFunc",
    "new_token_retrieve_func",
    # adapters
    "IssuerTokenGenerator",
    "IdentityTokenGenerator",
    "StaticTokenGenerator",
    "UnverifiedClaimsDecoder",
    "decode_access_token",
    # configuration
    "TokenSettings",
    "settings_from_env",
    "TokenDependencies",
    "create_token_dependencies",
    "create_token_generator",
]
