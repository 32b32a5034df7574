"""
Powertools instances shared by the dispatcher and the Lambda adapter.

Service name, log level and tracing are configured through the standard
POWERTOOLS_* environment variables.
"""

from aws_lambda_powertools.logging import Logger
from aws_lambda_powertools.metrics import Metrics
from aws_lambda_powertools.tracing import Tracer

METRICS_NAMESPACE = 'LambdaRestApi'

logger: Logger = Logger()
tracer: Tracer = Tracer()

# RequestCount, ClientErrorCount and ServerErrorCount per invocation
metrics = Metrics(namespace=METRICS_NAMESPACE)
