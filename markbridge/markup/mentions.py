"""User, team and channel mention resolution.

Source-host mentions ("@user", "@org/team", "@{account-id}") become native
Slack mentions when the identity resolver knows the user, and a link to the
user's profile otherwise. Team mentions are never resolved, because not every
platform has a native group mention.

Slack mentions ("<@U123>", "<#C123|name>", "<!here>") become their
source-host equivalents.

Each distinct identifier is looked up once per text, and lookup failures
are treated exactly like "not found".
"""

import re
from dataclasses import dataclass
from typing import Callable, Dict, Optional

import structlog

from .cache import LookupCache
from .context import ChannelDirectory, ConversionContext, Identity
from .dialects import Dialect, DialectGrammar
from .links import markdown_link, outside_slack_tokens, slack_link

logger = structlog.get_logger()

SPECIAL_MENTIONS = ("here", "channel", "everyone")


@dataclass(frozen=True)
class Mention:
    """A mention found in source-host text."""

    identifier: str
    profile_url: str
    display_name: str
    is_group: bool = False


class MentionResolver:
    """Rewrites mentions from one dialect to another."""

    def __init__(
        self,
        source: DialectGrammar,
        target: DialectGrammar,
        context: ConversionContext,
    ) -> None:
        self.source = source
        self.target = target
        self.context = context

    def convert(self, text: str) -> str:
        if self.source.mention is None:
            return text
        if self.source.is_chat:
            return self._chat_to_host(text)
        # One lookup per distinct identifier across every segment of the text
        resolved: Dict[str, str] = {}
        return outside_slack_tokens(
            text, lambda segment: self._host_to_chat(segment, resolved)
        )

    # --- Lookups ---

    def lookup_identity(self, identifier: str) -> Optional[Identity]:
        """Resolve a user identifier on the target platform, via the cache."""
        platform = self.target.dialect
        cache = self.context.cache
        key = LookupCache.key(
            "identity", platform.value, identifier, source=self.source.dialect.value
        )
        if cache is not None:
            cached = cache.get(key)
            if cached is not None:
                return cached  # type: ignore[no-any-return]

        resolver = self.context.identities
        if resolver is None:
            return None

        try:
            identity = resolver.resolve(platform, identifier, source=self.source.dialect)
        except Exception as e:
            logger.warning(
                "Identity lookup failed",
                platform=platform.value,
                source=self.source.dialect.value,
                identifier=identifier,
                error=str(e),
            )
            return None

        logger.debug(
            "Identity lookup completed",
            platform=platform.value,
            identifier=identifier,
            found=identity is not None,
        )
        if identity is not None and cache is not None:
            cache.set(key, identity)
        return identity

    def lookup_channel_name(self, channel_id: str) -> Optional[str]:
        return self._cached_channel_lookup(
            channel_id, lambda directory: directory.channel_name(channel_id)
        )

    def lookup_workspace_url(self) -> Optional[str]:
        return self._cached_channel_lookup(
            "workspace_url", lambda directory: directory.workspace_url()
        )

    def _cached_channel_lookup(
        self, key_id: str, fetch: Callable[[ChannelDirectory], Optional[str]]
    ) -> Optional[str]:
        cache = self.context.cache
        key = LookupCache.key("channel", Dialect.SLACK.value, key_id)
        if cache is not None:
            cached = cache.get(key)
            if cached is not None:
                return cached  # type: ignore[no-any-return]

        directory = self.context.channels
        if directory is None:
            return None

        try:
            value = fetch(directory)
        except Exception as e:
            logger.warning("Channel lookup failed", key=key_id, error=str(e))
            return None

        if value and cache is not None:
            cache.set(key, value)
        return value or None

    # --- Source host -> Slack ---

    def parse_mention(self, identifier: str) -> Mention:
        thread = self.context.thread
        base = thread.base_url if thread else self.source.default_host

        if self.source.dialect is Dialect.BITBUCKET:
            return Mention(identifier, f"{base}/{identifier}/", f"@{identifier}")

        if "/" in identifier:
            org, team = identifier.split("/", 1)
            return Mention(identifier, f"{base}/{org}/teams/{team}", f"@{identifier}", True)
        return Mention(identifier, f"{base}/{identifier}", f"@{identifier}")

    def render_for_chat(self, mention: Mention, identity: Optional[Identity]) -> str:
        if identity is not None and identity.mention_token and not mention.is_group:
            return identity.mention_token

        # Fallback: linkify the profile on the source host
        url = mention.profile_url
        label = mention.display_name
        if identity is not None:
            url = identity.profile_url or url
            if mention.identifier.startswith("{") and identity.display_name:
                label = f"@{identity.display_name}"
        return slack_link(url, label)

    def _host_to_chat(self, text: str, resolved: Dict[str, str]) -> str:
        def _replace(m: re.Match) -> str:  # type: ignore[type-arg]
            identifier = m.group(1)
            if identifier not in resolved:
                mention = self.parse_mention(identifier)
                identity = None if mention.is_group else self.lookup_identity(identifier)
                resolved[identifier] = self.render_for_chat(mention, identity)
            return resolved[identifier]

        return self.source.mention.sub(_replace, text)  # type: ignore[union-attr]

    # --- Slack -> source host ---

    def _chat_to_host(self, text: str) -> str:
        identities: Dict[str, Optional[Identity]] = {}
        channels: Dict[str, str] = {}

        def _replace(m: re.Match) -> str:  # type: ignore[type-arg]
            kind, identifier, label = m.group(1), m.group(2), m.group(3)
            if kind == "@":
                if identifier not in identities:
                    identities[identifier] = self.lookup_identity(identifier)
                return self._render_user(identifier, label, identities[identifier])
            if kind == "#":
                if m.group(0) not in channels:
                    channels[m.group(0)] = self._render_channel(identifier, label)
                return channels[m.group(0)]
            return self._render_special(identifier, label, m.group(0))

        return self.source.mention.sub(_replace, text)  # type: ignore[union-attr]

    def _render_user(
        self, user_id: str, label: Optional[str], identity: Optional[Identity]
    ) -> str:
        if identity is not None and identity.mention_token:
            return identity.mention_token
        if label:
            return "@" + label.lstrip("@")
        if identity is not None and identity.display_name:
            return "@" + identity.display_name
        return f"@{user_id}"

    def _render_channel(self, channel_id: str, label: Optional[str]) -> str:
        name = label or self.lookup_channel_name(channel_id)
        if not name:
            return f"#{channel_id}"

        workspace_url = self.lookup_workspace_url()
        if workspace_url:
            return markdown_link(f"{workspace_url.rstrip('/')}/archives/{channel_id}", f"#{name}")
        return f"#{name}"

    @staticmethod
    def _render_special(command: str, label: Optional[str], literal: str) -> str:
        if command in SPECIAL_MENTIONS:
            return f"@{command}"
        # User groups ("subteam^S123") are never resolved
        if label:
            return label
        if command.startswith("subteam^"):
            return "@" + command.split("^", 1)[1]
        return literal
