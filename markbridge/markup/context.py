"""Per-call conversion context and the external collaborators it carries."""

import re
from dataclasses import dataclass, field
from functools import cached_property
from typing import Mapping, Optional, Protocol

from .cache import LookupCache
from .dialects import Dialect, DialectPair

# https://github.com/owner/repo/pull/123, https://bitbucket.org/ws/repo/pull-requests/123,
# optionally followed by a comment anchor or sub-path.
THREAD_URL_PATTERN = re.compile(
    r"^(https?)://([^/\s]+)/([^/\s]+)/([^/\s]+)/(pull|pull-requests|issues)/(\d+)"
)


@dataclass(frozen=True)
class ThreadURL:
    """Components of a pull request (or issue) URL."""

    scheme: str
    host: str
    owner: str
    repo: str
    kind: str
    number: str

    @classmethod
    def parse(cls, url: str) -> Optional["ThreadURL"]:
        """Parse a thread URL, or return None if it has an unexpected shape."""
        m = THREAD_URL_PATTERN.match(url or "")
        if not m:
            return None
        return cls(*m.groups())

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}"

    def link(self, owner: str, repo: str, number: str) -> str:
        """URL of another thread of the same kind on the same host."""
        return f"{self.base_url}/{owner}/{repo}/{self.kind}/{number}"


@dataclass(frozen=True)
class Identity:
    """Result of a positive identity lookup."""

    mention_token: Optional[str] = None
    profile_url: Optional[str] = None
    display_name: Optional[str] = None


class IdentityResolver(Protocol):
    """Maps a user identifier to its identity on a target platform.

    ``platform`` is the dialect whose native mention token is wanted, and
    ``identifier`` is the user handle as written in the text of the ``source``
    dialect; the same handle may belong to different people on GitHub and
    Bitbucket. Returns None when the user is not found; may raise
    ``IdentityLookupError`` on transport failures.
    """

    def resolve(
        self, platform: Dialect, identifier: str, source: Optional[Dialect] = None
    ) -> Optional[Identity]:
        ...


class ChannelDirectory(Protocol):
    """Looks up chat channel metadata."""

    def channel_name(self, channel_id: str) -> Optional[str]:
        ...

    def workspace_url(self) -> Optional[str]:
        ...


@dataclass(frozen=True)
class ConversionContext:
    """Everything a conversion needs besides the text itself."""

    pair: Optional[DialectPair] = None
    thread_url: str = ""
    # Issue tracker key prefix (or "default") -> browse base URL
    linkify_map: Mapping[str, str] = field(default_factory=dict)
    max_length: Optional[int] = None
    short_url: str = ""
    identities: Optional[IdentityResolver] = None
    channels: Optional[ChannelDirectory] = None
    cache: Optional[LookupCache] = None

    @cached_property
    def thread(self) -> Optional[ThreadURL]:
        """The parsed thread URL, or None if it is missing or malformed."""
        return ThreadURL.parse(self.thread_url)

    @property
    def canonical_url(self) -> str:
        """Where shortened links point to."""
        return self.short_url or self.thread_url
