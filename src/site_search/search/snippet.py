"""Excerpt extraction for search result previews.

The excerpt window opens a little before the first match so the hit keeps
some leading context, and ellipses mark whichever sides were cut.
"""

from __future__ import annotations


ELLIPSIS = "..."
DEFAULT_EXCERPT_LENGTH = 150
LEADING_CONTEXT = 50
MIN_FALLBACK_WORD_LENGTH = 3


def find_match_position(text: str, query: str) -> int:
    """Return the index of the best match of ``query`` in ``text``, or -1.

    The full query is tried first, then each query word longer than two
    characters in query order.
    """
    text_lower = text.lower()
    query_lower = query.lower()

    index = text_lower.find(query_lower)
    if index != -1:
        return index

    for word in query_lower.split():
        if len(word) < MIN_FALLBACK_WORD_LENGTH:
            continue
        index = text_lower.find(word)
        if index != -1:
            return index

    return -1


def highlight_excerpt(text: str, query: str, max_length: int = DEFAULT_EXCERPT_LENGTH) -> str:
    """Cut a preview of ``text`` around the first match of ``query``.

    Args:
        text: Field text (description, or content when there is none).
        query: Raw query text.
        max_length: Characters kept from the match onward.

    Returns:
        The excerpt, with ``...`` on each side that does not reach the text boundary.
    """
    index = find_match_position(text, query)

    if index == -1:
        excerpt = text[:max_length]
        return excerpt + ELLIPSIS if len(text) > max_length else excerpt

    start = max(0, index - LEADING_CONTEXT)
    end = min(len(text), index + max_length)

    excerpt = text[start:end]
    if start > 0:
        excerpt = ELLIPSIS + excerpt
    if end < len(text):
        excerpt = excerpt + ELLIPSIS
    return excerpt
