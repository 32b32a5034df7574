"""
Dispatcher options.

Only ``send_error`` and ``log_error`` are recognised. Unknown keys are
ignored unless strict options are enabled through ``REST_STRICT_OPTIONS``.
"""

from typing import Annotated, Any, Callable, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from rest_api.handlers.models.env_vars import get_rest_env_vars
from rest_api.handlers.utils.observability import logger


class RestOptions(BaseModel):
    """Error hooks used by a dispatcher instance."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    send_error: Annotated[Callable[..., Any], Field(
        description='Writes a structured error to the response: (response, error) -> None'
    )]

    log_error: Annotated[Callable[..., Any], Field(
        description='Records a structured error for operational visibility: (error) -> None'
    )]

    @classmethod
    def build(
        cls,
        options: Optional[Mapping[str, Any]],
        send_error: Callable[..., Any],
        log_error: Callable[..., Any],
    ) -> 'RestOptions':
        """Merge user options over the given defaults."""
        options = dict(options or {})
        unknown = sorted(set(options) - set(cls.model_fields))

        if unknown:
            if get_rest_env_vars().strict_options_enabled:
                raise ValueError(f'Unknown REST options: {", ".join(unknown)}')
            logger.debug('Ignoring unknown REST options', extra={'options': unknown})

        return cls(
            send_error=options.get('send_error') or send_error,
            log_error=options.get('log_error') or log_error,
        )
