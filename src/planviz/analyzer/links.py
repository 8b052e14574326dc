"""Markdown link splitting for warning messages."""

from __future__ import annotations

import re
from dataclasses import dataclass

LINK_PATTERN = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")


@dataclass(frozen=True)
class MessageLink:
    """A `[text](url)` link embedded in a message."""

    text: str
    url: str


def split_message_links(message: str) -> list[str | MessageLink]:
    """
    Split a message into plain text and link parts, in order.

    Example:
        >>> split_message_links("See [docs](https://x.y) now")
        ['See ', MessageLink(text='docs', url='https://x.y'), ' now']
    """
    parts: list[str | MessageLink] = []
    last_index = 0

    for match in LINK_PATTERN.finditer(message):
        if match.start() > last_index:
            parts.append(message[last_index:match.start()])
        parts.append(MessageLink(text=match.group(1), url=match.group(2)))
        last_index = match.end()

    if last_index < len(message):
        parts.append(message[last_index:])

    return parts


def strip_message_links(message: str) -> str:
    """Replace each link with its text."""
    return LINK_PATTERN.sub(lambda m: m.group(1), message)
