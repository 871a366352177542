import json
import logging
import time
import traceback
from dataclasses import asdict, dataclass
from typing import Any


@dataclass()
class HttpRequestLog:
    url: str
    method: str
    timestamp: int
    body: Any | None = None


@dataclass
class HttpResponseLog:
    status: int
    endTime: int
    totalTime: int
    errorMessage: str | None = None


@dataclass
class ErrorInfo:
    function: str
    line: int
    exceptionInfo: str | None = None


@dataclass
class ContextMessageLog:
    session: str | None = None
    httpRequest: HttpRequestLog | None = None
    httpResponse: HttpResponseLog | None = None
    errorInfo: ErrorInfo | None = None
    extraData: dict | None = None


@dataclass
class JsonLog:
    level: str
    timestamp: int
    context: str
    message: str
    lineno: int
    contextMessage: ContextMessageLog | None = None

    def _remove_null_values_from_log(self, json_log: dict):
        """
        Delete keys with the value ``None`` in a dictionary, recursively.
        """
        for key, value in list(json_log.items()):
            if value is None:
                del json_log[key]
            elif isinstance(value, dict):
                self._remove_null_values_from_log(value)
        return json_log

    def to_json(self):
        return json.dumps(
            self._remove_null_values_from_log(asdict(self)), default=str
        )


def get_milliseconds_now():
    return int(time.time() * 1000)


def http_request_log(
    method: str,
    url: str,
    timestamp: int | None = None,
    body: Any | None = None,
) -> HttpRequestLog:
    """
    Generate httpRequestLog for a request sent to the service
    """
    return HttpRequestLog(
        url=url,
        method=method,
        timestamp=timestamp or get_milliseconds_now(),
        body=body,
    )


class SafeJsonFormatter(logging.Formatter):
    """
    Json formatter with following schema
    {
        level: str,
        timestamp: Datetime,
        context: str,
        message: str,
        contextMessage: <contextMessage>
    }
    """

    def format(self, record) -> str:
        """
        Format logging record as json string.
        """

        if record.levelname == "ERROR":
            exception_info: str | None = None
            # Check if the error contains exception data
            if record.exc_info:
                exc_type, exc_value, exc_tb = record.exc_info
                exception_info = "".join(
                    traceback.format_exception(exc_type, exc_value, exc_tb)
                )

            record.error_detail = ErrorInfo(
                function=record.funcName,
                line=record.lineno,
                exceptionInfo=exception_info,
            )

        # Generate context_message
        context_message = ContextMessageLog(
            session=record.session if hasattr(record, "session") else None,
            httpRequest=(
                record.http_request if hasattr(record, "http_request") else None
            ),
            httpResponse=(
                record.http_response if hasattr(record, "http_response") else None
            ),
            errorInfo=(
                record.error_detail if hasattr(record, "error_detail") else None
            ),
            extraData=record.extra_data if hasattr(record, "extra_data") else None,
        )

        json_log = JsonLog(
            level=record.levelname,
            timestamp=get_milliseconds_now(),
            context=f"{record.module}.{record.funcName}",
            message=record.getMessage(),
            contextMessage=context_message,
            lineno=record.lineno,
        )

        return json_log.to_json()
