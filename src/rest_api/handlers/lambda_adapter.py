"""
Lambda entry point adapter.

Turns a REST handler created with ``with_rest`` into an AWS Lambda handler
for API Gateway proxy integrations (REST API and HTTP API payloads).
"""

import asyncio
from typing import Any, Callable, Dict

from aws_lambda_powertools.logging import correlation_paths
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from rest_api.handlers.rest import RestHandler, default_send_error
from rest_api.handlers.utils.errors import HttpError
from rest_api.handlers.utils.observability import logger, metrics, tracer
from rest_api.models.request import ApiRequest
from rest_api.models.response import ApiResponse


def _record_status_metrics(status_code: int) -> None:
    if status_code >= 500:
        metrics.add_metric(name="ServerErrorCount", unit=MetricUnit.Count, value=1)
    elif status_code >= 400:
        metrics.add_metric(name="ClientErrorCount", unit=MetricUnit.Count, value=1)


async def handle_event(app: RestHandler, event: Dict[str, Any]) -> ApiResponse:
    """
    Run a REST handler against a raw proxy event.

    Args:
        app: Handler created with ``with_rest``
        event: API Gateway proxy event

    Returns:
        The response written by the handler
    """
    response = ApiResponse()

    try:
        request = ApiRequest.from_event(event)
    except HttpError as error:
        logger.info("Rejected malformed request", extra={"error": error.message})
        default_send_error(response, error)
        return response

    await app(request, response)

    # Handlers that never end the response still get an answer
    if not response.headers_sent:
        response.end()

    return response


def create_lambda_handler(app: RestHandler) -> Callable[[Dict[str, Any], LambdaContext], Dict[str, Any]]:
    """
    Create a Lambda handler serving the given REST handler.

    Args:
        app: Handler created with ``with_rest``

    Returns:
        Lambda handler returning API Gateway proxy responses
    """

    @metrics.log_metrics(capture_cold_start_metric=True)
    @tracer.capture_lambda_handler
    @logger.inject_lambda_context(correlation_id_path=correlation_paths.API_GATEWAY_REST)
    def lambda_handler(event: Dict[str, Any], context: LambdaContext) -> Dict[str, Any]:
        metrics.add_metric(name="RequestCount", unit=MetricUnit.Count, value=1)

        response = asyncio.run(handle_event(app, event))

        _record_status_metrics(response.status_code)

        logger.debug("Request handled", extra={"status_code": response.status_code})
        return response.to_proxy_response()

    return lambda_handler
