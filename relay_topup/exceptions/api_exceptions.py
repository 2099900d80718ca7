from typing import Any


class APIClientError(Exception):
    """Basic exception for all errors of BaseAPIClient"""


class APIConnectionError(APIClientError):
    """Connection to the remote host failed"""


class APITimeoutError(APIClientError):
    """Request timed out"""


class APISSLError(APIClientError):
    """SSL handshake or certificate error"""


class APIResponseError(APIClientError):
    """Remote host answered with an unexpected status"""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: dict[str, Any] | None = None
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response = response or {}


class APIClientSideError(APIResponseError):
    """4xx response"""


class APIServerSideError(APIResponseError):
    """5xx response"""


class APIRateLimitError(APIResponseError):
    """429 response"""


class APIRetryExhaustedError(APIClientError):
    """All attempts allowed by the retry policy failed"""

    def __init__(self, message: str, attempts: int, last_error: Exception | None = None) -> None:
        super().__init__(message)
        self.attempts = attempts
        self.last_error = last_error
