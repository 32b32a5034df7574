"""
Pytest configuration and shared fixtures for the Lambda REST API adapter.

This module provides common test fixtures and configuration used across
unit and end-to-end tests.
"""

import asyncio
import os
from typing import Any, Callable, Dict, Optional
from unittest.mock import Mock

import pytest

from rest_api.models.request import ApiRequest
from rest_api.models.response import ApiResponse


# Test environment configuration
@pytest.fixture(scope="session", autouse=True)
def test_environment():
    """Set up test environment variables."""
    os.environ.update({
        "AWS_DEFAULT_REGION": "us-east-1",
        "POWERTOOLS_SERVICE_NAME": "test-lambda-rest-api",
        "POWERTOOLS_METRICS_NAMESPACE": "TestLambdaRestApi",
        "LOG_LEVEL": "DEBUG",
        "POWERTOOLS_TRACE_DISABLED": "true",  # Disable X-Ray in tests
        "LAMBDA_ENV_MODELER_DISABLE_CACHE": "true",  # Re-read env vars patched per test
    })


@pytest.fixture
def dispatch() -> Callable[..., ApiResponse]:
    """Run a REST handler against a request and return the written response."""

    def run(app, request: ApiRequest, response: Optional[ApiResponse] = None) -> ApiResponse:
        response = response or ApiResponse()
        asyncio.run(app(request, response))
        return response

    return run


@pytest.fixture
def make_event() -> Callable[..., Dict[str, Any]]:
    """Factory for API Gateway REST proxy events."""

    def build(
        method: str = "GET",
        path: str = "/api/resource",
        headers: Optional[Dict[str, str]] = None,
        query: Optional[Dict[str, str]] = None,
        multi_value_query: Optional[Dict[str, list]] = None,
        body: Optional[str] = None,
        is_base64_encoded: bool = False,
    ) -> Dict[str, Any]:
        return {
            "resource": path,
            "path": path,
            "httpMethod": method,
            "headers": headers or {},
            "multiValueHeaders": {},
            "queryStringParameters": query,
            "multiValueQueryStringParameters": multi_value_query,
            "pathParameters": None,
            "stageVariables": None,
            "requestContext": {
                "requestId": "test-request-id-123",
                "accountId": "123456789012",
                "stage": "test",
                "httpMethod": method,
                "path": path,
                "identity": {"sourceIp": "127.0.0.1", "userAgent": "test-agent/1.0"},
            },
            "body": body,
            "isBase64Encoded": is_base64_encoded,
        }

    return build


@pytest.fixture
def lambda_context():
    """Create a mock Lambda context for testing."""
    context = Mock()
    context.function_name = "test-lambda-function"
    context.function_version = "1"
    context.invoked_function_arn = "arn:aws:lambda:us-east-1:123456789012:function:test-lambda-function"
    context.memory_limit_in_mb = 512
    context.aws_request_id = "test-request-id-123"
    context.log_group_name = "/aws/lambda/test-lambda-function"
    context.log_stream_name = "2024/01/01/[$LATEST]test123"
    context.get_remaining_time_in_millis.return_value = 30000
    return context


# Integration test fixtures
@pytest.fixture
def integration_client():
    """HTTP client for end-to-end testing against a deployed stage."""
    import httpx

    base_url = os.environ.get("API_BASE_URL")
    if not base_url:
        pytest.skip("API_BASE_URL is not set")

    with httpx.Client(base_url=base_url, timeout=30.0) as client:
        yield client


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "e2e: End-to-end tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "e2e" in str(item.fspath):
            item.add_marker(pytest.mark.e2e)
