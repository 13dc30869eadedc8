"""Configuration loading."""

from pathlib import Path
from typing import Any, Optional

import structlog
from pydantic import ValidationError

from ..exceptions import InvalidConfigError
from .settings import Settings

logger = structlog.get_logger()

__all__ = ["Settings", "load_config"]


def load_config(env_file: Optional[Path] = None, **overrides: Any) -> Settings:
    """Load settings from the environment (and an optional .env file).

    Raises:
        InvalidConfigError: if any setting fails validation.
    """
    try:
        if env_file is not None:
            settings = Settings(_env_file=env_file, **overrides)  # type: ignore[call-arg]
        else:
            settings = Settings(**overrides)
    except ValidationError as e:
        raise InvalidConfigError(f"Invalid configuration: {e}") from e

    logger.debug(
        "Configuration loaded",
        max_message_length=settings.max_message_length,
        linkify_prefixes=sorted(settings.linkify_map),
        slack_lookups=settings.slack_bot_token is not None,
    )
    return settings
