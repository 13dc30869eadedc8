"""Configuration management using Pydantic Settings.

Features:
- Environment variable loading
- Type validation
- Default values
- Conversion context construction
"""

import json
from typing import Annotated, Any, Dict, Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from ..markup.cache import LookupCache
from ..markup.context import ChannelDirectory, ConversionContext, IdentityResolver
from ..markup.dialects import DialectPair
from ..utils.constants import (
    DEFAULT_IDENTITY_CACHE_TTL_SECONDS,
    DEFAULT_MAX_MESSAGE_LENGTH,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Translation
    max_message_length: int = Field(
        DEFAULT_MAX_MESSAGE_LENGTH,
        description="Slack messages longer than this get their hyperlinks shortened",
        gt=0,
    )
    # NoDecode: the validator below parses both JSON and KEY=url strings
    linkify_map: Annotated[Dict[str, str], NoDecode] = Field(
        default_factory=dict,
        description=(
            "Issue tracker key prefix to browse URL, e.g. "
            '{"PROJ": "https://tracker.example.com/browse", "default": "..."}'
        ),
    )
    identity_cache_ttl_seconds: int = Field(
        DEFAULT_IDENTITY_CACHE_TTL_SECONDS,
        description="Lifetime of cached identity and channel lookups (0 = no expiry)",
        ge=0,
    )

    # Slack
    slack_bot_token: Optional[SecretStr] = Field(
        None, description="Slack Bot User OAuth Token (xoxb-...), for channel lookups"
    )

    # Monitoring
    log_level: str = Field("INFO", description="Logging level")

    # Development
    debug: bool = Field(False, description="Enable debug mode")

    @field_validator("linkify_map", mode="before")
    @classmethod
    def parse_linkify_map(cls, v: Any) -> Dict[str, str]:
        """Parse a JSON object or a comma-separated KEY=url list."""
        if v is None:
            return {}
        if isinstance(v, str):
            value = v.strip()
            if not value:
                return {}
            if value.startswith("{"):
                try:
                    v = json.loads(value)
                except json.JSONDecodeError as e:
                    raise ValueError(f"linkify_map is not valid JSON: {e}")
            else:
                pairs = [item.strip() for item in value.split(",") if item.strip()]
                v = {}
                for item in pairs:
                    key, sep, url = item.partition("=")
                    if not sep or not key.strip() or not url.strip():
                        raise ValueError(
                            f"Invalid linkify_map entry {item!r}, expected KEY=url"
                        )
                    v[key.strip()] = url.strip()
        if not isinstance(v, dict):
            raise ValueError("linkify_map must be an object mapping prefixes to URLs")
        return {str(key): str(url) for key, url in v.items()}

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: Any) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v.upper()  # type: ignore[no-any-return]

    @property
    def slack_bot_token_str(self) -> Optional[str]:
        """Get Slack bot token as string."""
        if self.slack_bot_token:
            return self.slack_bot_token.get_secret_value()
        return None

    def create_cache(self) -> LookupCache:
        return LookupCache(default_ttl=self.identity_cache_ttl_seconds or None)

    def conversion_context(
        self,
        pair: Optional[DialectPair] = None,
        thread_url: str = "",
        short_url: str = "",
        identities: Optional[IdentityResolver] = None,
        channels: Optional[ChannelDirectory] = None,
        cache: Optional[LookupCache] = None,
    ) -> ConversionContext:
        """Build a conversion context from these settings and per-call values."""
        return ConversionContext(
            pair=pair,
            thread_url=thread_url,
            linkify_map=dict(self.linkify_map),
            max_length=self.max_message_length,
            short_url=short_url,
            identities=identities,
            channels=channels,
            cache=cache if cache is not None else self.create_cache(),
        )
