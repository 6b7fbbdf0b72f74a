"""Small text helpers shared by the extractors."""

import re

from visualforce_parser.domain.constants import ELLIPSIS

_WHITESPACE_RE = re.compile(r'\s+')


def truncate(text: str, limit: int, marker: str = ELLIPSIS) -> str:
    """Cut ``text`` to ``limit`` characters, appending ``marker`` when cut."""
    if len(text) <= limit:
        return text
    return text[:limit] + marker


def collapse_whitespace(text: str) -> str:
    """Join all whitespace runs (newlines included) into single spaces."""
    return _WHITESPACE_RE.sub(' ', text).strip()
