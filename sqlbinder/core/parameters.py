"""Placeholder parsing for SQL templates.

Scans a SQL template once, recognizes positional ``?`` and named
``:identifier`` placeholders outside single-quoted literals and rewrites
every named placeholder to ``?``.

Components:
- PlaceholderKind enum: Positional or named
- Placeholder: One placeholder occurrence
- ParsedTemplate: Normalized SQL plus ordered placeholders
- PlaceholderParser: Configuration-bound parser
- parse_sql: Pure parsing function

Rules:
- A literal span is copied verbatim and never inspected
- ``::`` is a cast operator and is copied through
- ``:`` followed by anything other than an identifier start is a literal
  colon, or raises ``MalformedPlaceholderError`` in strict mode
- Repeated names produce one placeholder per occurrence
"""

import logging
import re
from enum import Enum
from typing import TYPE_CHECKING, Final, Optional

from mypy_extensions import mypyc_attr

from sqlbinder.core.config import ParserConfiguration
from sqlbinder.core.literals import LiteralSpan, find_literal_spans
from sqlbinder.exceptions import MalformedPlaceholderError, SQLParsingError
from sqlbinder.utils.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence


__all__ = (
    "ParsedTemplate",
    "Placeholder",
    "PlaceholderKind",
    "PlaceholderParser",
    "parse_sql",
)

logger = get_logger("sqlbinder.core.parameters")

POSITIONAL_TOKEN: Final = "?"
NAMED_PREFIX: Final = ":"

# Neither pattern has alternation or nested repetition.
_PLACEHOLDER_CHARS: Final = re.compile(r"[?:]")
_IDENTIFIER: Final = re.compile(r"[^\W\d]\w*")


class PlaceholderKind(str, Enum):
    """Placeholder kind enumeration with string values."""

    POSITIONAL = "positional"
    NAMED = "named"

    def __str__(self) -> str:
        """String representation for better error messages.

        Returns:
            The enum value as a string.
        """
        return self.value


@mypyc_attr(allow_interpreted_subclasses=False)
class Placeholder:
    """A single placeholder occurrence.

    Attributes are read-only.

    Attributes:
        kind: Positional or named
        name: Placeholder name (None for positional placeholders)
        occurrence_index: Rank in scan order (0-indexed), also the index of
            the matching ``?`` in the normalized SQL
        position: Character offset of the token in the original SQL
    """

    __slots__ = ("_kind", "_name", "_occurrence_index", "_position")

    def __init__(self, kind: PlaceholderKind, name: Optional[str], occurrence_index: int, position: int) -> None:
        """Initialize placeholder information.

        Args:
            kind: Placeholder kind
            name: Name for named placeholders, None otherwise
            occurrence_index: Order of appearance (0-indexed)
            position: Character position in the original SQL
        """
        self._kind = kind
        self._name = name
        self._occurrence_index = occurrence_index
        self._position = position

    @property
    def kind(self) -> PlaceholderKind:
        return self._kind

    @property
    def name(self) -> Optional[str]:
        return self._name

    @property
    def occurrence_index(self) -> int:
        return self._occurrence_index

    @property
    def position(self) -> int:
        return self._position

    @property
    def is_named(self) -> bool:
        return self._kind is PlaceholderKind.NAMED

    @property
    def placeholder_text(self) -> str:
        """Placeholder token as written in the original SQL."""
        if self._name is None:
            return POSITIONAL_TOKEN
        return f"{NAMED_PREFIX}{self._name}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Placeholder):
            return False
        return (
            self._kind is other._kind
            and self._name == other._name
            and self._occurrence_index == other._occurrence_index
            and self._position == other._position
        )

    def __hash__(self) -> int:
        return hash((self._kind, self._name, self._occurrence_index, self._position))

    def __repr__(self) -> str:
        return (
            f"Placeholder(kind={self._kind!r}, name={self._name!r}, "
            f"occurrence_index={self._occurrence_index}, position={self._position})"
        )


@mypyc_attr(allow_interpreted_subclasses=False)
class ParsedTemplate:
    """Result of parsing a SQL template.

    Immutable once produced. Safe to share between threads and to cache by
    source text.
    """

    __slots__ = ("_literal_spans", "_normalized_sql", "_placeholders", "_source_sql")

    def __init__(
        self,
        source_sql: str,
        normalized_sql: str,
        placeholders: "Sequence[Placeholder]" = (),
        literal_spans: "Sequence[LiteralSpan]" = (),
    ) -> None:
        self._source_sql = source_sql
        self._normalized_sql = normalized_sql
        self._placeholders: tuple[Placeholder, ...] = tuple(placeholders)
        self._literal_spans: tuple[LiteralSpan, ...] = tuple(literal_spans)

    @property
    def source_sql(self) -> str:
        return self._source_sql

    @property
    def normalized_sql(self) -> str:
        return self._normalized_sql

    @property
    def placeholders(self) -> "tuple[Placeholder, ...]":
        return self._placeholders

    @property
    def literal_spans(self) -> "tuple[LiteralSpan, ...]":
        return self._literal_spans

    @property
    def placeholder_count(self) -> int:
        return len(self.placeholders)

    @property
    def positional_count(self) -> int:
        """Number of ``?`` placeholders in the original SQL."""
        return sum(1 for placeholder in self.placeholders if placeholder.name is None)

    @property
    def has_named(self) -> bool:
        return any(placeholder.name is not None for placeholder in self.placeholders)

    @property
    def parameter_names(self) -> "tuple[str, ...]":
        """Distinct placeholder names in order of first appearance."""
        return tuple(dict.fromkeys(p.name for p in self.placeholders if p.name is not None))

    def occurrences(self, name: str) -> "tuple[Placeholder, ...]":
        """All occurrences of the named placeholder ``name``."""
        return tuple(placeholder for placeholder in self.placeholders if placeholder.name == name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParsedTemplate):
            return False
        return (
            self.source_sql == other.source_sql
            and self.normalized_sql == other.normalized_sql
            and self.placeholders == other.placeholders
        )

    def __hash__(self) -> int:
        return hash((self.source_sql, self.normalized_sql, self.placeholders))

    def __repr__(self) -> str:
        return f"ParsedTemplate(normalized_sql={self.normalized_sql!r}, placeholders={self.placeholders!r})"


def parse_sql(sql: str, *, strict: bool = False, max_sql_length: Optional[int] = None) -> ParsedTemplate:
    """Parse a SQL template into normalized SQL and placeholder descriptors.

    Args:
        sql: SQL template text
        strict: Raise on ``:`` not followed by an identifier instead of
            keeping it as a literal colon
        max_sql_length: Reject templates longer than this many characters

    Raises:
        MalformedPlaceholderError: In strict mode, for a bare ``:``.
        SQLParsingError: If ``sql`` exceeds ``max_sql_length``.

    Returns:
        The parsed template
    """
    if max_sql_length is not None and len(sql) > max_sql_length:
        msg = f"SQL template length {len(sql)} exceeds maximum of {max_sql_length} characters"
        raise SQLParsingError(msg)

    if POSITIONAL_TOKEN not in sql and NAMED_PREFIX not in sql:
        return ParsedTemplate(sql, sql, (), find_literal_spans(sql))

    spans = find_literal_spans(sql)
    span_count = len(spans)
    span_index = 0
    length = len(sql)

    placeholders: list[Placeholder] = []
    parts: list[str] = []
    copied_until = 0
    resume_at = 0

    for match in _PLACEHOLDER_CHARS.finditer(sql):
        index = match.start()
        if index < resume_at:
            continue
        while span_index < span_count and spans[span_index].end <= index:
            span_index += 1
        if span_index < span_count and spans[span_index].start <= index:
            resume_at = spans[span_index].end
            continue

        if sql[index] == POSITIONAL_TOKEN:
            placeholders.append(Placeholder(PlaceholderKind.POSITIONAL, None, len(placeholders), index))
            continue

        name_start = index + 1
        if name_start < length and sql[name_start] == NAMED_PREFIX:
            resume_at = name_start + 1
            continue

        identifier = _IDENTIFIER.match(sql, name_start)
        if identifier is None:
            if strict:
                raise MalformedPlaceholderError(index, sql)
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("Treating ':' at offset %d as a literal colon", index)
            continue

        placeholders.append(Placeholder(PlaceholderKind.NAMED, identifier.group(), len(placeholders), index))
        parts.append(sql[copied_until:index])
        parts.append(POSITIONAL_TOKEN)
        copied_until = resume_at = identifier.end()

    if not parts:
        return ParsedTemplate(sql, sql, placeholders, spans)
    parts.append(sql[copied_until:])
    return ParsedTemplate(sql, "".join(parts), placeholders, spans)


@mypyc_attr(allow_interpreted_subclasses=False)
class PlaceholderParser:
    """Parser bound to a ``ParserConfiguration``.

    Holds no per-call state; one instance may be shared between threads.
    """

    __slots__ = ("_max_sql_length", "_strict")

    def __init__(self, config: Optional[ParserConfiguration] = None) -> None:
        if config is None:
            config = ParserConfiguration()
        self._strict = config.strict_placeholders
        self._max_sql_length = config.max_sql_length

    @property
    def strict(self) -> bool:
        return self._strict

    def parse(self, sql: str) -> ParsedTemplate:
        """Parse ``sql`` using this parser's configuration.

        Args:
            sql: SQL template text

        Returns:
            The parsed template
        """
        return parse_sql(sql, strict=self._strict, max_sql_length=self._max_sql_length)

    def count_placeholders(self, sql: str) -> int:
        """Count the placeholders in ``sql``."""
        return self.parse(sql).placeholder_count
