"""
Response object handed to REST handlers.

Handlers normally just return a JSON value and let the dispatcher write it,
but they may also write the response themselves (e.g. to issue a redirect or
use a custom status). Once the response has been ended it is considered sent
and can no longer be changed.
"""

import base64
import json
from typing import Any, Dict, Optional, Union

from aws_lambda_powertools.shared.json_encoder import Encoder

JSON_CONTENT_TYPE = 'application/json; charset=utf-8'


class ResponseAlreadySentError(RuntimeError):
    """Raised when a response is modified after it has been sent."""


def serialize_json(value: Any) -> str:
    return json.dumps(value, separators=(',', ':'), cls=Encoder)


class ApiResponse:
    """Mutable HTTP response that is turned into an API Gateway proxy response."""

    def __init__(self):
        self.status_code: int = 200
        self.headers: Dict[str, str] = {}
        self.body: Union[str, bytes] = ''
        self.headers_sent: bool = False

    def _ensure_not_sent(self) -> None:
        if self.headers_sent:
            raise ResponseAlreadySentError('Cannot modify the response after it has been sent')

    def status(self, status_code: int) -> 'ApiResponse':
        self._ensure_not_sent()
        self.status_code = status_code
        return self

    def set_header(self, name: str, value: Any) -> 'ApiResponse':
        self._ensure_not_sent()
        self.headers[name.lower()] = str(value)
        return self

    def get_header(self, name: str) -> Optional[str]:
        return self.headers.get(name.lower())

    def remove_header(self, name: str) -> 'ApiResponse':
        self._ensure_not_sent()
        self.headers.pop(name.lower(), None)
        return self

    def end(self, data: Union[str, bytes] = '') -> 'ApiResponse':
        self._ensure_not_sent()
        self.body = data
        self.headers_sent = True
        return self

    def json(self, value: Any) -> 'ApiResponse':
        self.set_header('Content-Type', JSON_CONTENT_TYPE)
        return self.end(serialize_json(value))

    def send(self, value: Any = None) -> 'ApiResponse':
        """Send a value, picking the content type from its Python type."""
        if value is None:
            return self.end()

        if isinstance(value, bytes):
            if self.get_header('Content-Type') is None:
                self.set_header('Content-Type', 'application/octet-stream')
            return self.end(value)

        if isinstance(value, str):
            if self.get_header('Content-Type') is None:
                self.set_header('Content-Type', 'text/html; charset=utf-8')
            return self.end(value)

        return self.json(value)

    def redirect(self, location: str, status_code: int = 307) -> 'ApiResponse':
        self.status(status_code)
        self.set_header('Location', location)
        return self.end()

    def to_proxy_response(self) -> Dict[str, Any]:
        """Build the API Gateway proxy integration response."""
        if isinstance(self.body, bytes):
            body = base64.b64encode(self.body).decode('ascii')
            is_base64_encoded = True
        else:
            body = self.body
            is_base64_encoded = False

        return {
            'statusCode': self.status_code,
            'headers': dict(self.headers),
            'body': body,
            'isBase64Encoded': is_base64_encoded,
        }
