# flake8: noqa F401
from .exceptions import (
    SafeServiceApiError,
    SafeServiceClientException,
    SafeServiceConnectionError,
    SafeServiceMalformedResponse,
    SafeServiceServerError,
)
