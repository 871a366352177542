import logging
from typing import Any, Callable, TypeVar

import requests

from ..loggers.custom_logger import (
    HttpResponseLog,
    get_milliseconds_now,
    http_request_log,
)
from .exceptions import (
    SafeServiceApiError,
    SafeServiceConnectionError,
    SafeServiceMalformedResponse,
    SafeServiceServerError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Status used by the service for structured errors `{"code": 1, "message": "", "arguments": []}`
API_ERROR_STATUS_CODE = 422


def parse_json_response(parse: Callable[[Any], T], data: Any, url: str) -> T:
    """
    :param parse: Function to convert json data to the expected type
    :param data: Decoded json
    :param url: Url for logging purposes
    :return: Parsed data
    :raises SafeServiceMalformedResponse: if data has not the expected shape
    """
    try:
        return parse(data)
    except (KeyError, ValueError, TypeError, AttributeError) as exc:
        logger.warning("Unexpected response from %s: %s", url, data)
        raise SafeServiceMalformedResponse(
            f"Unexpected response from {url}: {data}"
        ) from exc


def is_api_error(data: Any) -> bool:
    """
    :return: ``True`` if ``data`` has the shape of a structured error
    """
    return (
        isinstance(data, dict)
        and isinstance(data.get("code"), int)
        and not isinstance(data.get("code"), bool)
        and isinstance(data.get("arguments"), list)
    )


class BaseHTTPClient:
    def __init__(
        self,
        request_timeout: int = 10,
        pool_connections: int = 10,
        pool_maxsize: int = 100,
    ):
        self.http_session = self._prepare_http_session(pool_connections, pool_maxsize)
        self.request_timeout = request_timeout

    def _prepare_http_session(
        self, pool_connections: int, pool_maxsize: int
    ) -> requests.Session:
        """
        Prepare http session with custom pooling. See:
        https://urllib3.readthedocs.io/en/stable/advanced-usage.html
        https://docs.python-requests.org/en/v1.2.3/api/#requests.adapters.HTTPAdapter
        """
        session = requests.Session()
        adapter = requests.adapters.HTTPAdapter(
            pool_connections=pool_connections,
            pool_maxsize=pool_maxsize,  # Number of concurrent connections
            pool_block=False,
        )
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    def _do_request(
        self,
        method: str,
        url: str,
        params: dict[str, str] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> requests.Response:
        start_time = get_milliseconds_now()
        try:
            response = self.http_session.request(
                method,
                url,
                params=params,
                json=payload,
                timeout=self.request_timeout,
            )
        except IOError as exc:
            logger.warning("Problem connecting to %s %s", method, url)
            raise SafeServiceConnectionError(f"{method} {url}: {exc}") from exc

        end_time = get_milliseconds_now()
        logger.info(
            "Http request",
            extra={
                "http_request": http_request_log(
                    method, response.url or url, start_time, payload
                ),
                "http_response": HttpResponseLog(
                    response.status_code,
                    end_time,
                    end_time - start_time,
                    response.text if not response.ok else None,
                ),
            },
        )
        return response

    def _process_response(self, response: requests.Response, url: str) -> Any | None:
        """
        :return: Decoded json, ``None`` if response has no body
        :raises SafeServiceApiError: for structured errors returned by the service
        :raises SafeServiceServerError: for any other error status
        :raises SafeServiceMalformedResponse: if body cannot be decoded
        """
        if response.status_code == API_ERROR_STATUS_CODE:
            raise self._build_api_error(self._decode_json(response, url), url)
        if response.status_code >= 400:
            logger.warning(
                "Server error %d for %s: %s", response.status_code, url, response.text
            )
            raise SafeServiceServerError(response.status_code, url)
        if not response.content or not response.content.strip():
            return None
        data = self._decode_json(response, url)
        if is_api_error(data):
            # Structured errors can also be returned with a success status
            raise self._build_api_error(data, url)
        return data

    def _build_api_error(self, data: Any, url: str) -> SafeServiceApiError:
        return parse_json_response(
            lambda data: SafeServiceApiError(
                int(data["code"]), data.get("message"), list(data.get("arguments") or [])
            ),
            data,
            url,
        )

    def _decode_json(self, response: requests.Response, url: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            logger.warning("Cannot decode json from %s: %s", url, response.text)
            raise SafeServiceMalformedResponse(
                f"Cannot decode json from {url}: {response.text}"
            ) from exc

    def _do_get(self, url: str, params: dict[str, str] | None = None) -> Any | None:
        return self._process_response(self._do_request("GET", url, params=params), url)

    def _do_post(self, url: str, payload: dict[str, Any]) -> Any | None:
        return self._process_response(
            self._do_request("POST", url, payload=payload), url
        )
