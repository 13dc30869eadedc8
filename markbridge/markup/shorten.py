"""Message length enforcement for Slack.

Slack rejects message updates longer than 4000 characters ("msg_too_long").
When a message is over budget, every labeled hyperlink is pointed at a
canonical short URL (e.g. the comment's own URL), so the links remain one
click away without taking up the message's length.
"""

import re
from typing import Optional

import structlog

logger = structlog.get_logger()

LABELED_LINK_PATTERN = re.compile(r"<((?:https?|mailto):[^|<>]+)\|([^<>]+)>")


def shorten_urls(
    text: str, max_length: int, short_url: str, length: Optional[int] = None
) -> str:
    """Replace hyperlink targets with ``short_url`` if ``text`` is too long.

    Messages within budget are returned unchanged, however long their URLs.
    ``length`` is the length of the message as sent, when ``text`` still
    holds placeholders.
    """
    if length is None:
        length = len(text)
    if length <= max_length or not short_url:
        return text

    shortened, count = LABELED_LINK_PATTERN.subn(
        lambda m: f"<{short_url}|{m.group(2)}>", text
    )
    logger.debug(
        "Shortened hyperlinks in long message",
        length=length,
        max_length=max_length,
        links=count,
    )
    return shortened
