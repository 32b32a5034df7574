"""
Structured HTTP error utilities for the REST adapter.

This module provides the error type raised by handlers and by the adapter
itself, along with factory helpers for the common status codes and the
conversion used by the dispatcher to turn any failure into a structured one.
"""

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Dict, Iterable, Optional

from aws_lambda_powertools.event_handler.exceptions import ServiceError

from rest_api.models.output import INTERNAL_SERVER_ERROR_MESSAGE, ErrorPayload
from rest_api.models.response import serialize_json


def _reason_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return 'Unknown'


def _escape_header_attribute(value: Any) -> str:
    return str(value).replace('\\', '\\\\').replace('"', '\\"')


@dataclass
class HttpErrorOutput:
    """What gets written to the response when an error is sent."""

    status_code: int
    payload: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)


class HttpError(Exception):
    """Error carrying an HTTP status code, a client-safe payload and metadata."""

    is_http_error = True

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: int = 500,
        data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        attributes: Optional[Dict[str, Any]] = None,
    ):
        if status_code < 400:
            raise ValueError(f'First argument must be a number (400+): {status_code}')

        # Powertools errors may carry structured messages
        if message is not None and not isinstance(message, str):
            message = serialize_json(message)

        self.message = message or _reason_phrase(status_code)
        super().__init__(self.message)
        self.status_code = int(status_code)
        self.data = dict(data) if data else {}
        self.headers = dict(headers) if headers else {}
        self.attributes = attributes

    @property
    def is_server(self) -> bool:
        return self.status_code >= 500

    @property
    def original_error(self) -> Optional[BaseException]:
        return self.data.get('original_error')

    @property
    def output(self) -> HttpErrorOutput:
        # Server errors never expose their message to the client
        message = INTERNAL_SERVER_ERROR_MESSAGE if self.is_server else self.message

        payload = ErrorPayload(
            status_code=self.status_code,
            error=_reason_phrase(self.status_code),
            message=message,
            attributes=self.attributes,
        )

        return HttpErrorOutput(
            status_code=self.status_code,
            payload=payload.to_json_dict(),
            headers=dict(self.headers),
        )

    def __repr__(self) -> str:
        return f'{type(self).__name__}({self.status_code}, {self.message!r})'


def is_http_error(error: Any) -> bool:
    """Check whether an error already carries HTTP semantics."""
    return getattr(error, 'is_http_error', False) is True


def to_http_error(
    error: BaseException,
    status_code: int = 500,
    message: Optional[str] = None,
) -> HttpError:
    """
    Convert any exception into a structured HTTP error.

    Structured errors are returned unchanged. Powertools ``ServiceError``
    instances keep their status code and message. Anything else is wrapped
    into a new error with the original exception attached as ``original_error``.

    Args:
        error: The exception to convert
        status_code: Status code used when wrapping an opaque error
        message: Internal message used when wrapping an opaque error

    Returns:
        A structured HTTP error
    """
    if is_http_error(error):
        return error  # type: ignore[return-value]

    if isinstance(error, ServiceError):
        return HttpError(error.msg, status_code=error.status_code, data={'original_error': error})

    return HttpError(
        message or str(error) or type(error).__name__,
        status_code=status_code,
        data={'original_error': error},
    )


def bad_request(message: Optional[str] = None, data: Optional[Dict[str, Any]] = None) -> HttpError:
    return HttpError(message, status_code=400, data=data)


def unauthorized(
    message: Optional[str] = None,
    scheme: Optional[str] = None,
    attributes: Optional[Dict[str, Any]] = None,
) -> HttpError:
    """
    Create a 401 error, optionally with a ``WWW-Authenticate`` challenge.

    With a scheme, the header is built from the attributes and the message,
    e.g. ``unauthorized('Invalid password', 'sample')`` produces
    ``WWW-Authenticate: sample error="Invalid password"`` and exposes the
    message under ``attributes.error`` in the payload.
    """
    headers: Dict[str, str] = {}
    payload_attributes: Optional[Dict[str, Any]] = None

    if scheme:
        challenge = scheme
        parts = []
        payload_attributes = dict(attributes or {})

        for name, value in (attributes or {}).items():
            value = '' if value is None else value
            parts.append(f'{name}="{_escape_header_attribute(value)}"')

        if message:
            parts.append(f'error="{_escape_header_attribute(message)}"')
            payload_attributes['error'] = message

        if parts:
            challenge = f'{challenge} {", ".join(parts)}'

        headers['WWW-Authenticate'] = challenge

    return HttpError(message, status_code=401, headers=headers, attributes=payload_attributes)


def forbidden(message: Optional[str] = None, data: Optional[Dict[str, Any]] = None) -> HttpError:
    return HttpError(message, status_code=403, data=data)


def not_found(message: Optional[str] = None, data: Optional[Dict[str, Any]] = None) -> HttpError:
    return HttpError(message, status_code=404, data=data)


def method_not_allowed(
    message: Optional[str] = None,
    data: Optional[Dict[str, Any]] = None,
    allow: Optional[Iterable[str]] = None,
) -> HttpError:
    headers = {'Allow': ', '.join(allow)} if allow else None
    return HttpError(message, status_code=405, data=data, headers=headers)


def conflict(message: Optional[str] = None, data: Optional[Dict[str, Any]] = None) -> HttpError:
    return HttpError(message, status_code=409, data=data)


def unprocessable_entity(message: Optional[str] = None, data: Optional[Dict[str, Any]] = None) -> HttpError:
    return HttpError(message, status_code=422, data=data)


def too_many_requests(
    message: Optional[str] = None,
    data: Optional[Dict[str, Any]] = None,
    retry_after: Optional[int] = None,
) -> HttpError:
    headers = {'Retry-After': str(retry_after)} if retry_after else None
    return HttpError(message, status_code=429, data=data, headers=headers)


def internal(
    message: Optional[str] = None,
    data: Optional[Dict[str, Any]] = None,
    status_code: int = 500,
) -> HttpError:
    return HttpError(message, status_code=status_code, data=data)


def bad_gateway(message: Optional[str] = None, data: Optional[Dict[str, Any]] = None) -> HttpError:
    return HttpError(message, status_code=502, data=data)


def service_unavailable(
    message: Optional[str] = None,
    data: Optional[Dict[str, Any]] = None,
    retry_after: Optional[int] = None,
) -> HttpError:
    headers = {'Retry-After': str(retry_after)} if retry_after else None
    return HttpError(message, status_code=503, data=data, headers=headers)
