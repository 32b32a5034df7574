"""
REST handler layer.

- rest: method dispatch, JSON serialization and error normalization
- validation: Pydantic validation of request query, body and headers
- lambda_adapter: API Gateway proxy event to request/response translation

Handlers use AWS Lambda Powertools for structured logging, tracing and
metrics through the shared instances in utils.observability.
"""

from rest_api.handlers.utils.observability import logger, tracer, metrics

__all__ = [
    "logger",
    "tracer",
    "metrics",
]
