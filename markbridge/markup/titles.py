"""Linkification of pull request titles.

Titles are short single lines, so they get their own entry point: issue
tracker keys ("PROJ-123") are linked according to a configurable map of key
prefixes to base URLs, and "[[owner/]repo]#123" references are linked
relative to the pull request's own repository.
"""

import re
from typing import Dict, Mapping, Optional
from urllib.parse import urlsplit

import structlog

from .context import ConversionContext
from .links import expand_references, outside_slack_tokens, slack_link

logger = structlog.get_logger()

DEFAULT_PREFIX_KEY = "default"

ISSUE_KEY_PATTERN = re.compile(r"\b([A-Z]{2,})-\d+\b")


def build_issue_link(base_url: str, issue_key: str) -> Optional[str]:
    """Join a tracker base URL and an issue key, or None if the base is unusable."""
    parts = urlsplit(base_url.strip())
    if not parts.scheme or not parts.netloc:
        logger.warning(
            "Failed to build issue tracker link",
            base_url=base_url,
            issue_key=issue_key,
        )
        return None
    return f"{base_url.strip().rstrip('/')}/{issue_key}"


def issue_link(linkify_map: Mapping[str, str], issue_key: str, prefix: str) -> Optional[str]:
    """Look up a case-sensitive key prefix, falling back to the "default" entry."""
    base_url = linkify_map.get(prefix)
    if base_url is None:
        base_url = linkify_map.get(DEFAULT_PREFIX_KEY)
    if base_url is None:
        return None
    return build_issue_link(base_url, issue_key)


def linkify_issue_keys(title: str, linkify_map: Mapping[str, str]) -> str:
    """Link every issue key that the map knows about; leave the rest as is."""
    if not linkify_map:
        return title

    links: Dict[str, Optional[str]] = {}

    def _replace(m: re.Match) -> str:  # type: ignore[type-arg]
        issue_key = m.group(0)
        if issue_key not in links:
            links[issue_key] = issue_link(linkify_map, issue_key, m.group(1))
        link = links[issue_key]
        return slack_link(link, issue_key) if link else issue_key

    return outside_slack_tokens(title, lambda segment: ISSUE_KEY_PATTERN.sub(_replace, segment))


def linkify_title(title: str, context: ConversionContext) -> str:
    """Replace issue keys and pull request references in a title with Slack links.

    If nothing is recognized, the title is returned unchanged.
    """
    title = linkify_issue_keys(title, context.linkify_map)
    return expand_references(title, context.thread)
