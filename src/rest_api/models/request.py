"""
Request object handed to REST handlers.

Built from an API Gateway proxy event (REST API payload 1.0 or HTTP API
payload 2.0) using the Powertools event data classes. Header names are
lower-cased and the body is parsed according to its content type, so handlers
and schemas see plain Python values.
"""

import base64
import binascii
import json
from typing import Any, Dict, Optional, Union
from urllib.parse import parse_qs

from aws_lambda_powertools.utilities.data_classes import APIGatewayProxyEvent, APIGatewayProxyEventV2

from rest_api.handlers.utils.errors import bad_request


TEXT_MEDIA_TYPES = frozenset({
    'application/json',
    'application/x-www-form-urlencoded',
    'application/xml',
    'application/javascript',
})


def _collapse(values: Dict[str, list]) -> Dict[str, Any]:
    # Repeated keys become lists, single values stay scalars
    return {key: value[0] if len(value) == 1 else list(value) for key, value in values.items()}


def _media_type(content_type: Optional[str]) -> str:
    return (content_type or '').split(';')[0].strip().lower()


def is_text_media_type(media_type: str) -> bool:
    """Check whether a body of this media type should be decoded as UTF-8 text."""
    return (
        media_type.startswith('text/')
        or media_type.endswith(('+json', '+xml'))
        or media_type in TEXT_MEDIA_TYPES
    )


def parse_body(raw_body: Union[str, bytes, None], content_type: Optional[str]) -> Any:
    """
    Parse a raw request body according to its content type.

    Args:
        raw_body: Body text or decoded base64 bytes, None when the request had no body
        content_type: Value of the Content-Type header

    Returns:
        Parsed JSON for JSON bodies, a dict for form bodies, bytes for binary
        bodies, the text otherwise
    """
    if raw_body is None:
        return None

    media_type = _media_type(content_type)

    if isinstance(raw_body, bytes):
        if not is_text_media_type(media_type):
            return raw_body
        try:
            raw_body = raw_body.decode('utf-8')
        except UnicodeDecodeError as exc:
            raise bad_request('Request body is not valid UTF-8', data={'original_error': exc})

    if media_type == 'application/json' or media_type.endswith('+json'):
        if not raw_body.strip():
            return {}
        try:
            return json.loads(raw_body)
        except json.JSONDecodeError as exc:
            raise bad_request('Invalid JSON', data={'original_error': exc})

    if media_type == 'application/x-www-form-urlencoded':
        return _collapse(parse_qs(raw_body, keep_blank_values=True))

    return raw_body


class ApiRequest:
    """Incoming HTTP request as seen by REST handlers."""

    def __init__(
        self,
        method: str,
        path: str = '/',
        headers: Optional[Dict[str, str]] = None,
        query: Optional[Dict[str, Any]] = None,
        body: Any = None,
        event: Optional[Dict[str, Any]] = None,
    ):
        self.method = method.upper()
        self.path = path
        self.headers = {name.lower(): value for name, value in (headers or {}).items()}
        self.query = dict(query or {})
        self.body = body
        self.event = event or {}

    @classmethod
    def from_event(cls, event: Dict[str, Any]) -> 'ApiRequest':
        """Build a request from a raw API Gateway proxy event."""
        try:
            if event.get('version') == '2.0':
                proxy_event = APIGatewayProxyEventV2(event)
                query = dict(proxy_event.query_string_parameters or {})
            else:
                proxy_event = APIGatewayProxyEvent(event)
                multi_value_query = proxy_event.multi_value_query_string_parameters or {}
                if multi_value_query:
                    query = _collapse(multi_value_query)
                else:
                    query = dict(proxy_event.query_string_parameters or {})

            method = proxy_event.http_method
            path = proxy_event.path
            headers = {name.lower(): value for name, value in (proxy_event.get('headers') or {}).items()}
        except KeyError as exc:
            raise bad_request('Malformed API Gateway proxy event', data={'original_error': exc})

        raw_body = proxy_event.body
        if raw_body and proxy_event.is_base64_encoded:
            try:
                raw_body = base64.b64decode(raw_body, validate=True)
            except binascii.Error as exc:
                raise bad_request('Request body is not valid base64', data={'original_error': exc})

        return cls(
            method=method,
            path=path,
            headers=headers,
            query=query,
            body=parse_body(raw_body, headers.get('content-type')),
            event=event,
        )

    def __repr__(self) -> str:
        return f'ApiRequest({self.method} {self.path})'
