"""Parsed template cache.

Parsing is pure, so a ``ParsedTemplate`` can be reused for every execution
of the same SQL text. ``TemplateCache`` is a bounded LRU keyed by the exact
source text that parses each distinct text at most once, even under
concurrent access.

Components:
- CacheStats: Hit, miss and eviction counters
- TemplateCache: LRU cache with get-or-parse semantics
- get_template_cache: Process-wide default cache built from the global configuration
"""

import threading
from collections import OrderedDict
from typing import TYPE_CHECKING, Final, Optional

from mypy_extensions import mypyc_attr

from sqlbinder.core.config import DEFAULT_CACHE_SIZE, BinderConfig, get_global_config
from sqlbinder.core.parameters import ParsedTemplate, PlaceholderParser
from sqlbinder.exceptions import ImproperConfigurationError
from sqlbinder.utils.logging import get_logger

if TYPE_CHECKING:
    from sqlbinder.core.config import ParserConfiguration

__all__ = (
    "CacheStats",
    "TemplateCache",
    "clear_template_cache",
    "get_template_cache",
)

logger = get_logger("sqlbinder.core.cache")

CACHE_STATS_SLOTS: Final = ("evictions", "hits", "misses", "total_operations")


@mypyc_attr(allow_interpreted_subclasses=False)
class CacheStats:
    """Cache statistics tracking."""

    __slots__ = CACHE_STATS_SLOTS

    def __init__(self) -> None:
        self.hits = 0
        self.misses = 0
        self.evictions = 0
        self.total_operations = 0

    @property
    def hit_rate(self) -> float:
        """Calculate cache hit rate as percentage."""
        total = self.hits + self.misses
        return (self.hits / total * 100) if total > 0 else 0.0

    @property
    def miss_rate(self) -> float:
        """Calculate cache miss rate as percentage."""
        return 100.0 - self.hit_rate

    def record_hit(self) -> None:
        self.hits += 1
        self.total_operations += 1

    def record_miss(self) -> None:
        self.misses += 1
        self.total_operations += 1

    def record_eviction(self) -> None:
        self.evictions += 1

    def reset(self) -> None:
        """Reset all statistics."""
        self.hits = 0
        self.misses = 0
        self.evictions = 0
        self.total_operations = 0

    def __repr__(self) -> str:
        return (
            f"CacheStats(hit_rate={self.hit_rate:.1f}%, "
            f"hits={self.hits}, misses={self.misses}, "
            f"evictions={self.evictions}, ops={self.total_operations})"
        )


@mypyc_attr(allow_interpreted_subclasses=False)
class TemplateCache:
    """LRU cache of parsed templates keyed by SQL text.

    Args:
        max_size: Maximum number of templates to keep (LRU eviction when exceeded)
        parser_config: Parser settings applied to every cache miss
        enable_stats: Record hit/miss statistics

    Raises:
        ImproperConfigurationError: If ``max_size`` is not positive.
    """

    __slots__ = ("_cache", "_enable_stats", "_lock", "_max_size", "_parser", "_stats")

    def __init__(
        self,
        max_size: int = DEFAULT_CACHE_SIZE,
        parser_config: "Optional[ParserConfiguration]" = None,
        enable_stats: bool = True,
    ) -> None:
        if max_size <= 0:
            msg = f"max_size must be positive, got {max_size}"
            raise ImproperConfigurationError(msg)
        self._cache: OrderedDict[str, ParsedTemplate] = OrderedDict()
        self._lock = threading.Lock()
        self._max_size = max_size
        self._parser = PlaceholderParser(parser_config)
        self._stats = CacheStats()
        self._enable_stats = enable_stats

    @property
    def max_size(self) -> int:
        return self._max_size

    def get(self, sql: str) -> Optional[ParsedTemplate]:
        """Get a cached template without parsing.

        Args:
            sql: Exact SQL text

        Returns:
            Cached template or None if not present
        """
        with self._lock:
            template = self._cache.get(sql)
            if template is None:
                if self._enable_stats:
                    self._stats.record_miss()
                return None
            self._cache.move_to_end(sql)
            if self._enable_stats:
                self._stats.record_hit()
            return template

    def get_or_parse(self, sql: str) -> ParsedTemplate:
        """Return the cached template for ``sql``, parsing it on first use.

        Parsing happens while holding the cache lock, so each distinct text
        is parsed once. Parse errors propagate and nothing is cached.

        Args:
            sql: Exact SQL text

        Returns:
            Parsed template
        """
        with self._lock:
            template = self._cache.get(sql)
            if template is not None:
                self._cache.move_to_end(sql)
                if self._enable_stats:
                    self._stats.record_hit()
                return template

            if self._enable_stats:
                self._stats.record_miss()
            template = self._parser.parse(sql)
            if len(self._cache) >= self._max_size:
                self._cache.popitem(last=False)
                if self._enable_stats:
                    self._stats.record_eviction()
            self._cache[sql] = template
            return template

    def clear(self) -> None:
        """Clear all cache entries and statistics."""
        with self._lock:
            self._cache.clear()
            self._stats.reset()

    def get_stats(self) -> CacheStats:
        return self._stats

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, sql: object) -> bool:
        with self._lock:
            return sql in self._cache


_template_cache: Optional[TemplateCache] = None
_template_cache_config: Optional[BinderConfig] = None
_cache_lock = threading.Lock()


def get_template_cache() -> TemplateCache:
    """Get the process-wide template cache.

    The cache is rebuilt when the global configuration has been replaced
    since it was created.

    Returns:
        Default template cache instance
    """
    global _template_cache, _template_cache_config
    config = get_global_config()
    if _template_cache is None or _template_cache_config is not config:
        with _cache_lock:
            if _template_cache is None or _template_cache_config is not config:
                _template_cache = TemplateCache(
                    max_size=config.cache_config.max_cache_size,
                    parser_config=config.parser_config,
                    enable_stats=config.cache_config.enable_cache_stats,
                )
                _template_cache_config = config
                logger.debug("Created template cache with max_size=%d", config.cache_config.max_cache_size)
    return _template_cache


def clear_template_cache() -> None:
    """Clear the process-wide template cache if it exists."""
    if _template_cache is not None:
        _template_cache.clear()
