"""
Request validation for REST handlers.

``with_validation`` validates the request query, body and headers against
Pydantic schemas before calling the handler. Schemas may coerce, trim or
default values; the normalized values replace the raw ones on the request.

Example:
    class CreateUserRequest(BaseModel):
        name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

    @with_validation({'body': CreateUserRequest})
    def create_user(request, response):
        return {'name': request.body['name']}
"""

import functools
import inspect
from typing import Any, Callable, Dict, Mapping, Tuple

from pydantic import ConfigDict, ValidationError, create_model

from rest_api.handlers.utils.errors import bad_request
from rest_api.models.request import ApiRequest
from rest_api.models.response import ApiResponse

REQUEST_SEGMENTS = ('headers', 'body', 'query')


def _format_path(loc: Tuple[Any, ...]) -> str:
    return '.'.join(str(part) for part in loc) or 'request'


def format_validation_error(exc: ValidationError) -> str:
    """
    Describe the first validation failure with the full path of the field.

    Args:
        exc: Pydantic validation error raised for the composite request schema

    Returns:
        Message such as '"body.foo" is required'
    """
    error = exc.errors()[0]
    path = _format_path(error['loc'])
    ctx = error.get('ctx') or {}

    if error['type'] == 'missing':
        return f'"{path}" is required'

    if error['type'] == 'string_pattern_mismatch':
        return f'"{path}" with value "{error["input"]}" fails to match the required pattern: {ctx.get("pattern")}'

    if error['type'] in ('literal_error', 'enum'):
        return f'"{path}" must be {ctx.get("expected")}'

    message = error['msg']
    return f'"{path}" {message[:1].lower()}{message[1:]}'


def build_request_schema(schemas: Mapping[str, Any]):
    """Build a single model validating the request segments that have a schema."""
    unknown = sorted(set(schemas) - set(REQUEST_SEGMENTS))
    if unknown:
        raise ValueError(f'Unknown request segments in validation schemas: {", ".join(unknown)}')

    fields: Dict[str, Any] = {
        segment: (schema, ...)
        for segment, schema in schemas.items()
        if schema is not None
    }

    return create_model('RequestSchema', __config__=ConfigDict(extra='allow'), **fields)


def with_validation(schemas: Mapping[str, Any]) -> Callable[[Callable], Callable]:
    """
    Create a decorator validating requests before the handler runs.

    Args:
        schemas: Mapping with optional ``query``, ``body`` and ``headers`` schemas

    Returns:
        Decorator wrapping a handler into an async validating handler
    """
    request_schema = build_request_schema(schemas)

    def decorator(handler: Callable) -> Callable:
        @functools.wraps(handler)
        async def validated_handler(request: ApiRequest, response: ApiResponse) -> Any:
            values = {segment: getattr(request, segment) for segment in REQUEST_SEGMENTS}

            # A request without a body is validated as an empty object
            if 'body' in request_schema.model_fields and values['body'] in (None, ''):
                values['body'] = {}

            try:
                validated = request_schema.model_validate(values)
            except ValidationError as exc:
                raise bad_request(format_validation_error(exc), data={'original_error': exc})

            # Schemas normalize values, so copy them back to the request
            normalized = validated.model_dump(by_alias=True)
            for segment in REQUEST_SEGMENTS:
                setattr(request, segment, normalized.get(segment))

            result = handler(request, response)
            if inspect.isawaitable(result):
                result = await result

            return result

        return validated_handler

    return decorator
