"""Markup translation between GitHub, Bitbucket and Slack."""

from .cache import LookupCache
from .context import (
    ChannelDirectory,
    ConversionContext,
    Identity,
    IdentityResolver,
    ThreadURL,
)
from .convert import (
    bitbucket_to_slack,
    convert,
    convert_title,
    github_to_slack,
    slack_to_bitbucket,
    slack_to_github,
    translate,
)
from .dialects import Dialect, DialectPair, MarkupText

__all__ = [
    "ChannelDirectory",
    "ConversionContext",
    "Dialect",
    "DialectPair",
    "Identity",
    "IdentityResolver",
    "LookupCache",
    "MarkupText",
    "ThreadURL",
    "bitbucket_to_slack",
    "convert",
    "convert_title",
    "github_to_slack",
    "slack_to_bitbucket",
    "slack_to_github",
    "translate",
]
