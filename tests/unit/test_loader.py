"""Tests for SQL template loading."""

from pathlib import Path

import pytest

from sqlbinder.exceptions import SQLFileNotFoundError, SQLLoadingError
from sqlbinder.loader import load_sql_resource, load_sql_text


def test_load_sql_text(sql_fixtures: Path) -> None:
    text = load_sql_text(sql_fixtures / "select-test-bean.sql")
    assert text.startswith("SELECT * from test_bean")


def test_load_sql_text_accepts_str(sql_fixtures: Path) -> None:
    assert load_sql_text(str(sql_fixtures / "select-test-bean.sql")) == load_sql_text(
        sql_fixtures / "select-test-bean.sql"
    )


def test_load_missing_file(tmp_path: Path) -> None:
    with pytest.raises(SQLFileNotFoundError) as exc_info:
        load_sql_text(tmp_path / "missing.sql")

    assert exc_info.value.path == str(tmp_path / "missing.sql")


def test_load_undecodable_file(tmp_path: Path) -> None:
    path = tmp_path / "latin1.sql"
    path.write_bytes(b"SELECT '\xff'")

    with pytest.raises(SQLLoadingError):
        load_sql_text(path)


def test_load_sql_resource() -> None:
    text = load_sql_resource("tests.fixtures.sql", "search-recruiting-name.sql")
    assert ":now" in text


def test_load_sql_resource_from_module() -> None:
    import tests.fixtures.sql as fixtures

    assert load_sql_resource(fixtures, "select-test-bean.sql") == load_sql_resource(
        "tests.fixtures.sql", "select-test-bean.sql"
    )


@pytest.mark.parametrize(
    ("package", "resource"),
    [("tests.fixtures.sql", "missing.sql"), ("no_such_package_for_sqlbinder", "x.sql")],
    ids=["missing_resource", "missing_package"],
)
def test_load_missing_resource(package: str, resource: str) -> None:
    with pytest.raises(SQLFileNotFoundError):
        load_sql_resource(package, resource)
