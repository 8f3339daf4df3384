from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest

import sqlbinder.core.cache as cache_module
import sqlbinder.core.config as config_module

here = Path(__file__).parent
root_path = here.parent
sql_fixtures_path = here / "fixtures" / "sql"


@pytest.fixture(autouse=True)
def reset_global_state() -> Generator[None, None, None]:
    """Give every test a default configuration and an empty default cache."""
    config_module._global_config = None  # pyright: ignore[reportPrivateUsage]
    cache_module._template_cache = None  # pyright: ignore[reportPrivateUsage]
    cache_module._template_cache_config = None  # pyright: ignore[reportPrivateUsage]
    yield
    config_module._global_config = None  # pyright: ignore[reportPrivateUsage]
    cache_module._template_cache = None  # pyright: ignore[reportPrivateUsage]
    cache_module._template_cache_config = None  # pyright: ignore[reportPrivateUsage]


@pytest.fixture
def sql_fixtures() -> Path:
    return sql_fixtures_path


@pytest.fixture
def search_recruiting_name_sql() -> str:
    return (sql_fixtures_path / "search-recruiting-name.sql").read_text(encoding="utf-8")


@pytest.fixture
def search_recruiting_sql() -> str:
    return (sql_fixtures_path / "search-recruiting.sql").read_text(encoding="utf-8")
