"""
Environment variable models for type-safe configuration.

This module defines the Pydantic model for environment variables read by the
REST adapter, parsed with aws-lambda-env-modeler.
"""

from typing import Annotated

from aws_lambda_env_modeler import get_environment_variables
from pydantic import BaseModel, Field


class RestEnvVars(BaseModel):
    """Environment variables for the REST adapter."""

    # Service name for observability
    POWERTOOLS_SERVICE_NAME: Annotated[str, Field(
        description='Service name for AWS Powertools'
    )] = 'lambda-rest-api'

    # Metrics namespace
    POWERTOOLS_METRICS_NAMESPACE: Annotated[str, Field(
        description='Namespace for CloudWatch metrics'
    )] = 'LambdaRestApi'

    # Log level for AWS Powertools Logger
    LOG_LEVEL: Annotated[str, Field(
        description='Log level for application logging',
        pattern=r'^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$'
    )] = 'INFO'

    # Reject unknown dispatcher options instead of ignoring them
    REST_STRICT_OPTIONS: Annotated[str, Field(
        description='Reject unknown dispatcher options (true/false)',
        pattern=r'^(true|false)$'
    )] = 'false'

    @property
    def strict_options_enabled(self) -> bool:
        """Check if unknown dispatcher options must be rejected."""
        return self.REST_STRICT_OPTIONS == 'true'


def get_rest_env_vars() -> RestEnvVars:
    """
    Get typed environment variables for the REST adapter.

    Returns:
        Validated environment variables model instance
    """
    return get_environment_variables(model=RestEnvVars)
