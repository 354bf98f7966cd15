from enum import Enum

# Seconds before a token's claimed expiry at which it is renewed.
TIME_TO_TOKEN_EXPIRY = 120

RETRY_LIMIT = 3
RETRY_INTERVAL_SECONDS = 3.0
RETRY_DEADLINE_SECONDS = 60.0

DEFAULT_REQUEST_TIMEOUT_SECONDS = 10.0
DEFAULT_IAM_SERVICE_URL = "https://client.greenlake.hpe.com/api/iam"

# Key under which the token retrieve function is handed to service clients.
TOKEN_RETRIEVE_FUNCTION_KEY = "tokenRetrieveFunc"


class ErrorKind(Enum):
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    INTERNAL_ERROR = "internal_error"
    TIMEOUT = "timeout"
