"""Throughput checks for the placeholder parser.

Timings take the best of several ``timeit`` runs. Parsing is held to a
per-call bound and to a multiple of a pure-Python character loop over the
same text, which tracks the speed of the host.
"""

import time
import timeit
from typing import Callable

from sqlbinder.core.binder import PlainSql
from sqlbinder.core.parameters import parse_sql

NUMBER = 2000
REPEAT = 5

# About 10us per parse of the search fixtures on a typical host.
MAX_PARSE_SECONDS = 50e-6
MAX_BASELINE_RATIO = 10.0


def _best_per_call(func: "Callable[[], object]") -> float:
    return min(timeit.repeat(func, number=NUMBER, repeat=REPEAT)) / NUMBER


def _character_loop(sql: str) -> None:
    for _ in sql:
        pass


def test_parse_time_per_template(search_recruiting_name_sql: str) -> None:
    per_parse = _best_per_call(lambda: parse_sql(search_recruiting_name_sql))
    baseline = _best_per_call(lambda: _character_loop(search_recruiting_name_sql))

    assert per_parse < MAX_PARSE_SECONDS, f"parse took {per_parse * 1e6:.1f}us"
    assert per_parse < baseline * MAX_BASELINE_RATIO, (
        f"parse took {per_parse * 1e6:.1f}us against a {baseline * 1e6:.1f}us character loop"
    )


def test_parse_scales_linearly() -> None:
    fragment = "SELECT a, 'x:y?' AS b FROM t WHERE c = :c AND d = ? "
    small = fragment * 50
    large = fragment * 500

    start = time.perf_counter()
    for _ in range(20):
        parse_sql(small)
    small_elapsed = time.perf_counter() - start

    start = time.perf_counter()
    for _ in range(20):
        parse_sql(large)
    large_elapsed = time.perf_counter() - start

    assert parse_sql(large).placeholder_count == 1000
    assert large_elapsed < max(small_elapsed, 0.001) * 40


def test_cached_bind_time(search_recruiting_name_sql: str) -> None:
    def bind() -> None:
        PlainSql.parse(search_recruiting_name_sql).set("now", 1).set("limit", 10).set("offset", 0).resolve()

    bind()
    per_bind = _best_per_call(bind)

    assert per_bind < MAX_PARSE_SECONDS, f"cached bind took {per_bind * 1e6:.1f}us"
