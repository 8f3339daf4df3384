"""SQL template loading from files and package resources."""

from functools import lru_cache
from importlib import resources
from pathlib import Path
from types import ModuleType
from typing import Union

from sqlbinder.exceptions import SQLFileNotFoundError, SQLLoadingError
from sqlbinder.utils.logging import get_logger

__all__ = ("load_sql_resource", "load_sql_text")

logger = get_logger("sqlbinder.loader")


def load_sql_text(path: Union[str, Path], encoding: str = "utf-8") -> str:
    """Read a SQL template from a file.

    Args:
        path: Path to the SQL file
        encoding: Text encoding of the file

    Raises:
        SQLFileNotFoundError: If the file does not exist.
        SQLLoadingError: If the file cannot be read or decoded.

    Returns:
        The file contents
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise SQLFileNotFoundError(str(file_path))
    try:
        text = file_path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Failed to read SQL file {file_path}: {e}"
        raise SQLLoadingError(msg) from e
    logger.debug("Loaded SQL file %s (%d characters)", file_path, len(text))
    return text


def load_sql_resource(package: Union[str, ModuleType], resource: str, encoding: str = "utf-8") -> str:
    """Read a SQL template shipped as package data.

    Resource contents are cached, since installed package data does not
    change while the process runs.

    Args:
        package: Package name or module containing the resource
        resource: Resource file name relative to the package
        encoding: Text encoding of the resource

    Raises:
        SQLFileNotFoundError: If the package or resource does not exist.
        SQLLoadingError: If the resource cannot be read or decoded.

    Returns:
        The resource contents
    """
    package_name = package if isinstance(package, str) else package.__name__
    return _load_resource(package_name, resource, encoding)


@lru_cache(maxsize=256)
def _load_resource(package: str, resource: str, encoding: str) -> str:
    location = f"{package}:{resource}"
    try:
        ref = resources.files(package).joinpath(resource)
    except ModuleNotFoundError as e:
        raise SQLFileNotFoundError(location) from e
    if not ref.is_file():
        raise SQLFileNotFoundError(location)
    try:
        text = ref.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Failed to read SQL resource {location}: {e}"
        raise SQLLoadingError(msg) from e
    logger.debug("Loaded SQL resource %s (%d characters)", location, len(text))
    return text
