import time
from pathlib import Path

from sqlbinder import PlainSql, TemplateCache, parse_sql

SQL = (Path(__file__).parent.parent / "tests" / "fixtures" / "sql" / "search-recruiting-name.sql").read_text(
    encoding="utf-8"
)
ITERATIONS = 300000


def bench_parse() -> float:
    start = time.perf_counter()
    for _ in range(ITERATIONS):
        parse_sql(SQL)
    return time.perf_counter() - start


def bench_cached_bind() -> float:
    cache = TemplateCache()
    start = time.perf_counter()
    for _ in range(ITERATIONS):
        PlainSql.parse(SQL, cache=cache).set("now", 1).set("limit", 10).set("offset", 0).resolve()
    return time.perf_counter() - start


if __name__ == "__main__":
    for name, bench in (("parse", bench_parse), ("cached bind", bench_cached_bind)):
        elapsed = bench()
        print(f"{name:<12} {ITERATIONS} iterations in {elapsed:.3f}s ({ITERATIONS / elapsed:,.0f}/s)")  # noqa: T201
