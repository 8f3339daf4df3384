"""Single-quoted string literal detection.

Locates every ``'...'`` region of a SQL text so that placeholder detection can
skip it. A doubled apostrophe inside a literal is an escaped quote. A literal
left open at the end of the text is closed there.
"""

from typing import NamedTuple

__all__ = ("LiteralSpan", "find_literal_spans")

_QUOTE = "'"


class LiteralSpan(NamedTuple):
    """Half-open ``[start, end)`` range of a quoted literal, quotes included."""

    start: int
    end: int

    def __contains__(self, offset: object) -> bool:
        return isinstance(offset, int) and self.start <= offset < self.end

    def text(self, sql: str) -> str:
        """Return the literal, delimiters included, as it appears in ``sql``."""
        return sql[self.start : self.end]


def find_literal_spans(text: str) -> "tuple[LiteralSpan, ...]":
    """Find all single-quoted literal spans in ``text``.

    Args:
        text: SQL text to scan

    Returns:
        Spans in scan order, non-overlapping and sorted by ``start``
    """
    find = text.find
    length = len(text)
    spans: list[LiteralSpan] = []

    start = find(_QUOTE)
    while start != -1:
        cursor = start + 1
        while True:
            close = find(_QUOTE, cursor)
            if close == -1:
                spans.append(LiteralSpan(start, length))
                return tuple(spans)
            if close + 1 < length and text[close + 1] == _QUOTE:
                cursor = close + 2
                continue
            break
        end = close + 1
        spans.append(LiteralSpan(start, end))
        start = find(_QUOTE, end)

    return tuple(spans)
