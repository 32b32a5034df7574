"""
Output models for error responses using Pydantic.

This module defines the JSON body written to the client whenever a request
fails, regardless of whether the failure was a routing, validation or
application error.
"""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field

INTERNAL_SERVER_ERROR_MESSAGE = 'An internal server error occurred'


class ErrorPayload(BaseModel):
    """Client-visible body of a structured HTTP error."""

    model_config = ConfigDict(populate_by_name=True)

    status_code: Annotated[int, Field(
        alias='statusCode',
        ge=400,
        description='HTTP status code of the error',
        examples=[400, 405, 500]
    )]

    error: Annotated[str, Field(
        description='HTTP reason phrase for the status code',
        examples=['Bad Request', 'Method Not Allowed', 'Internal Server Error']
    )]

    message: Annotated[str, Field(
        description='Client-safe error message',
        examples=['"body.foo" is required', INTERNAL_SERVER_ERROR_MESSAGE]
    )]

    attributes: Annotated[dict[str, Any] | None, Field(
        description='Authentication challenge attributes for 401 errors'
    )] = None

    def to_json_dict(self) -> dict[str, Any]:
        """Dump the payload with wire field names, omitting empty attributes."""
        return self.model_dump(by_alias=True, exclude_none=True)
