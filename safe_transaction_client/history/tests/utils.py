import functools
import json
from typing import Any

import pytest
import requests


def skip_on(exception, reason="Test skipped due to a controlled exception"):
    """
    Decorator to skip a test if an exception is raised instead of failing it

    :param exception:
    :param reason:
    :return:
    """

    def decorator_func(f):
        @functools.wraps(f)
        def wrapper(*args, **kwargs):
            try:
                # Run the test
                return f(*args, **kwargs)
            except exception:
                pytest.skip(reason)

        return wrapper

    return decorator_func


def build_response(
    status_code: int = 200,
    json_data: Any | None = None,
    content: bytes | None = None,
    url: str = "https://safe-transaction-mainnet.safe.global/api/",
) -> requests.Response:
    """
    :return: `requests.Response` with the provided body, to be returned by a mocked session
    """
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    if content is not None:
        response._content = content
    elif json_data is not None:
        response._content = json.dumps(json_data).encode()
    else:
        response._content = b""
    return response
