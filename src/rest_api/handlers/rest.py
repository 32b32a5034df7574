"""
REST dispatcher for API routes.

``with_rest`` turns a mapping of HTTP methods to handlers into a single
request handler. Handlers return JSON-serializable values (or None) and raise
``HttpError`` for expected failures; everything else becomes a 500 response.

Example:
    app = with_rest({
        'GET': list_users,
        'POST': with_validation({'body': CreateUserRequest})(create_user),
    })
"""

import inspect
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from rest_api.handlers.utils.errors import HttpError, internal, method_not_allowed, to_http_error
from rest_api.handlers.utils.observability import logger
from rest_api.models.options import RestOptions
from rest_api.models.request import ApiRequest
from rest_api.models.response import JSON_CONTENT_TYPE, ApiResponse, ResponseAlreadySentError

Handler = Callable[[ApiRequest, ApiResponse], Any]
RestHandler = Callable[[ApiRequest, ApiResponse], Awaitable[None]]

INTERNAL_ERROR_MESSAGE = 'Unhandled error in request handler'


def default_log_error(error: HttpError) -> None:
    """Log server errors, preferring the traceback of the original error."""
    # Client errors are expected and not actionable
    if not error.is_server:
        return

    exc = error.original_error or error

    logger.error(
        'Internal server error',
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={'status_code': error.status_code},
    )


def default_send_error(response: ApiResponse, error: HttpError) -> None:
    """Write the error output (headers, status and JSON payload) to the response."""
    output = error.output

    for name, value in output.headers.items():
        response.set_header(name, value)

    response.status(output.status_code).json(output.payload)


async def _invoke(handler: Handler, request: ApiRequest, response: ApiResponse) -> Any:
    result = handler(request, response)

    if inspect.isawaitable(result):
        result = await result

    return result


def with_rest(
    methods: Optional[Mapping[str, Handler]] = None,
    options: Optional[Mapping[str, Any]] = None,
) -> RestHandler:
    """
    Create a request handler that dispatches on the HTTP method.

    Args:
        methods: Mapping of upper case HTTP method names to handlers
        options: Optional ``send_error`` and ``log_error`` hooks

    Returns:
        Async handler taking the request and the response
    """
    method_map: Dict[str, Handler] = dict(methods or {})
    rest_options = RestOptions.build(options, send_error=default_send_error, log_error=default_log_error)

    async def rest_handler(request: ApiRequest, response: ApiResponse) -> None:
        try:
            handler = method_map.get(request.method)

            if handler is None:
                raise method_not_allowed(
                    f'Method {request.method} is not supported for this endpoint',
                    allow=sorted(method_map) or None,
                )

            result = await _invoke(handler, request, response)

            # Nothing left to do if the handler sent the response itself (e.g. a redirect)
            if response.headers_sent:
                if result is not None:
                    rest_options.log_error(internal(
                        'Response sent inside handler with a returned value',
                        data={'original_error': ResponseAlreadySentError(
                            'You have sent the response inside your handler but still returned a value. '
                            'Either send the response or return a JSON value, not both.'
                        )},
                    ))
                return

            # Write a proper JSON null instead of an empty body
            if result is None:
                response.set_header('Content-Type', JSON_CONTENT_TYPE)
                response.set_header('Content-Length', '4')
                response.end('null')
            else:
                response.json(result)
        except Exception as exc:
            error = to_http_error(exc, message=INTERNAL_ERROR_MESSAGE)

            rest_options.log_error(error)

            # The client already got a response, it cannot be replaced
            if not response.headers_sent:
                rest_options.send_error(response, error)

    return rest_handler
