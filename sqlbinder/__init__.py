"""sqlbinder: SQL template placeholder parsing and parameter binding."""

from sqlbinder import core, exceptions, loader, utils
from sqlbinder.__metadata__ import __version__
from sqlbinder.core.binder import BindingState, PlainSql, TemplateBinder
from sqlbinder.core.cache import CacheStats, TemplateCache, get_template_cache
from sqlbinder.core.config import BinderConfig, CacheConfiguration, ParserConfiguration
from sqlbinder.core.literals import LiteralSpan, find_literal_spans
from sqlbinder.core.parameters import ParsedTemplate, Placeholder, PlaceholderKind, parse_sql
from sqlbinder.exceptions import (
    ArityMismatchError,
    MalformedPlaceholderError,
    ParameterError,
    SQLBinderError,
    UnboundPlaceholderError,
)

__all__ = (
    "ArityMismatchError",
    "BinderConfig",
    "BindingState",
    "CacheConfiguration",
    "CacheStats",
    "LiteralSpan",
    "MalformedPlaceholderError",
    "ParameterError",
    "ParsedTemplate",
    "ParserConfiguration",
    "Placeholder",
    "PlaceholderKind",
    "PlainSql",
    "SQLBinderError",
    "TemplateBinder",
    "TemplateCache",
    "UnboundPlaceholderError",
    "__version__",
    "core",
    "exceptions",
    "find_literal_spans",
    "get_template_cache",
    "loader",
    "parse_sql",
    "utils",
)
