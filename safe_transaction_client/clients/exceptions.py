from typing import Any


class SafeServiceClientException(Exception):
    pass


class SafeServiceConnectionError(SafeServiceClientException, IOError):
    pass


class SafeServiceMalformedResponse(SafeServiceClientException):
    pass


class SafeServiceServerError(SafeServiceClientException):
    def __init__(self, status_code: int, url: str):
        super().__init__(f"Server error {status_code} for {url}")
        self.status_code = status_code
        self.url = url


class SafeServiceApiError(SafeServiceClientException):
    """
    Structured error reported by the service, e.g.
    {
        "code": 1,
        "message": "Checksum address validation failed",
        "arguments": ["0xabcd"]
    }
    """

    def __init__(
        self, code: int, message: str | None = None, arguments: list[Any] | None = None
    ):
        super().__init__(f'Code: {code}, Message: "{message or ""}"')
        self.code = code
        self.message = message
        self.arguments = arguments or []
