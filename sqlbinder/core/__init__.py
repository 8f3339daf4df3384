"""sqlbinder core: literal scanning, placeholder parsing and parameter binding.

Architecture Overview:
- literals.py: Single-quoted literal span detection
- parameters.py: Placeholder parser producing normalized SQL
- binder.py: Named/positional parameter binding
- cache.py: Parsed template cache keyed by SQL text
- config.py: Parser and cache configuration
"""

from sqlbinder.core.binder import BindingState, PlainSql, TemplateBinder
from sqlbinder.core.cache import CacheStats, TemplateCache, clear_template_cache, get_template_cache
from sqlbinder.core.config import (
    BinderConfig,
    CacheConfiguration,
    ParserConfiguration,
    get_global_config,
    load_config_from_env,
    set_global_config,
)
from sqlbinder.core.literals import LiteralSpan, find_literal_spans
from sqlbinder.core.parameters import ParsedTemplate, Placeholder, PlaceholderKind, PlaceholderParser, parse_sql

__all__ = (
    "BinderConfig",
    "BindingState",
    "CacheConfiguration",
    "CacheStats",
    "LiteralSpan",
    "ParsedTemplate",
    "ParserConfiguration",
    "Placeholder",
    "PlaceholderKind",
    "PlaceholderParser",
    "PlainSql",
    "TemplateBinder",
    "TemplateCache",
    "clear_template_cache",
    "find_literal_spans",
    "get_global_config",
    "get_template_cache",
    "load_config_from_env",
    "parse_sql",
    "set_global_config",
)
