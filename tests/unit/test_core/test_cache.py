"""Tests for the parsed template cache."""

import threading
from unittest.mock import patch

import pytest

import sqlbinder.core.config as config_module
from sqlbinder.core.cache import CacheStats, TemplateCache, clear_template_cache, get_template_cache
from sqlbinder.core.config import (
    BinderConfig,
    CacheConfiguration,
    ParserConfiguration,
    load_config_from_env,
    set_global_config,
)
from sqlbinder.core.literals import find_literal_spans
from sqlbinder.core.parameters import parse_sql
from sqlbinder.exceptions import ImproperConfigurationError, MalformedPlaceholderError


def test_get_or_parse_returns_same_instance() -> None:
    cache = TemplateCache()

    first = cache.get_or_parse("SELECT :a")
    second = cache.get_or_parse("SELECT :a")

    assert first is second
    assert first == parse_sql("SELECT :a")
    stats = cache.get_stats()
    assert stats.hits == 1
    assert stats.misses == 1


def test_lru_eviction() -> None:
    cache = TemplateCache(max_size=2)
    cache.get_or_parse("SELECT 1")
    cache.get_or_parse("SELECT 2")
    cache.get_or_parse("SELECT 1")
    cache.get_or_parse("SELECT 3")

    assert len(cache) == 2
    assert "SELECT 1" in cache
    assert "SELECT 2" not in cache
    assert cache.get_stats().evictions == 1


@pytest.mark.parametrize("max_size", [0, -1], ids=["zero", "negative"])
def test_non_positive_max_size_rejected(max_size: int) -> None:
    with pytest.raises(ImproperConfigurationError, match="max_size must be positive"):
        TemplateCache(max_size=max_size)


def test_single_entry_cache_evicts_on_every_new_text() -> None:
    cache = TemplateCache(max_size=1)

    assert cache.get_or_parse("SELECT ?").placeholder_count == 1
    assert cache.get_or_parse("SELECT :a, :b").placeholder_count == 2

    assert len(cache) == 1
    assert "SELECT ?" not in cache
    assert cache.get_stats().evictions == 1


def test_default_cache_rejects_zero_size_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SQLBINDER_MAX_CACHE_SIZE", "0")
    config = load_config_from_env()
    config_module._global_config = config  # pyright: ignore[reportPrivateUsage]

    with pytest.raises(ImproperConfigurationError):
        get_template_cache()


def test_get_does_not_parse() -> None:
    cache = TemplateCache()

    assert cache.get("SELECT ?") is None
    assert len(cache) == 0
    assert cache.get_stats().misses == 1


def test_parse_errors_are_not_cached() -> None:
    cache = TemplateCache(parser_config=ParserConfiguration(strict_placeholders=True))

    with pytest.raises(MalformedPlaceholderError):
        cache.get_or_parse("SELECT :")

    assert len(cache) == 0


def test_clear_resets_entries_and_stats() -> None:
    cache = TemplateCache()
    cache.get_or_parse("SELECT ?")
    cache.clear()

    assert len(cache) == 0
    assert cache.get_stats().total_operations == 0


def test_stats_disabled() -> None:
    cache = TemplateCache(enable_stats=False)
    cache.get_or_parse("SELECT ?")
    cache.get_or_parse("SELECT ?")

    assert cache.get_stats().total_operations == 0


def test_cache_stats_rates() -> None:
    stats = CacheStats()
    assert stats.hit_rate == 0.0

    stats.record_hit()
    stats.record_hit()
    stats.record_hit()
    stats.record_miss()

    assert stats.hit_rate == 75.0
    assert stats.miss_rate == 25.0
    assert "hits=3" in repr(stats)


def test_concurrent_access_parses_once() -> None:
    cache = TemplateCache()
    results = []
    barrier = threading.Barrier(8)

    def worker() -> None:
        barrier.wait()
        results.append(cache.get_or_parse("SELECT :shared, ?"))

    with patch("sqlbinder.core.parameters.find_literal_spans", wraps=find_literal_spans) as spy:
        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

    assert spy.call_count == 1
    assert len(results) == 8
    assert all(result is results[0] for result in results)


def test_default_cache_follows_global_config() -> None:
    default = get_template_cache()
    assert get_template_cache() is default

    set_global_config(BinderConfig(cache_config=CacheConfiguration(max_cache_size=7)))

    rebuilt = get_template_cache()
    assert rebuilt is not default
    assert rebuilt.max_size == 7


def test_clear_template_cache() -> None:
    get_template_cache().get_or_parse("SELECT ?")
    clear_template_cache()

    assert len(get_template_cache()) == 0
