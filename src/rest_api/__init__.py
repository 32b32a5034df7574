"""
Lambda REST API adapter.

This package standardizes how API route handlers running on AWS Lambda behind
API Gateway are written:

- with_rest: dispatches a request to a handler per HTTP method, serializes the
  returned value as JSON and turns raised errors into JSON error responses
- with_validation: validates request query, body and headers with Pydantic
  schemas before a handler runs
- create_lambda_handler: exposes a REST handler as a Lambda entry point

Errors raised by handlers should be HttpError instances (see the factories in
rest_api.handlers.utils.errors); any other exception becomes a 500 response.
"""

__version__ = "1.0.0"

from rest_api.handlers.lambda_adapter import create_lambda_handler
from rest_api.handlers.rest import default_log_error, default_send_error, with_rest
from rest_api.handlers.utils.errors import HttpError, is_http_error, to_http_error
from rest_api.handlers.validation import with_validation
from rest_api.models.request import ApiRequest
from rest_api.models.response import ApiResponse

__all__ = [
    "__version__",
    "with_rest",
    "with_validation",
    "create_lambda_handler",
    "default_log_error",
    "default_send_error",
    "HttpError",
    "is_http_error",
    "to_http_error",
    "ApiRequest",
    "ApiResponse",
]
