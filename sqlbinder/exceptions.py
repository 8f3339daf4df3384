from typing import Any, Optional

__all__ = (
    "ArityMismatchError",
    "ImproperConfigurationError",
    "MalformedPlaceholderError",
    "ParameterError",
    "SQLBinderError",
    "SQLFileNotFoundError",
    "SQLLoadingError",
    "SQLParsingError",
    "UnboundPlaceholderError",
)


class SQLBinderError(Exception):
    """Base exception class from which all sqlbinder exceptions inherit."""

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        """Initialize ``SQLBinderError``.

        Args:
            *args: args are converted to :class:`str` before passing to :class:`Exception`
            detail: detail of the exception.
        """
        str_args = [str(arg) for arg in args if arg]
        if not detail:
            if str_args:
                detail, *str_args = str_args
            elif hasattr(self, "detail"):
                detail = self.detail
        self.detail = detail
        super().__init__(*str_args)

    def __repr__(self) -> str:
        if self.detail:
            return f"{self.__class__.__name__} - {self.detail}"
        return self.__class__.__name__

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class ImproperConfigurationError(SQLBinderError):
    """Raised when a configuration value is out of range or inconsistent."""


class SQLParsingError(SQLBinderError):
    """Issues parsing SQL templates."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Issues parsing SQL template."
        super().__init__(message)


class SQLLoadingError(SQLBinderError):
    """Issues loading referenced SQL file."""

    def __init__(self, message: Optional[str] = None) -> None:
        if message is None:
            message = "Issues loading referenced SQL file."
        super().__init__(message)


class SQLFileNotFoundError(SQLLoadingError):
    """Raised when a SQL template file does not exist."""

    path: str

    def __init__(self, path: str) -> None:
        super().__init__(f"SQL file not found: {path}")
        self.path = path


# -- SQL Parameter Errors --
class ParameterError(SQLBinderError):
    """Base class for parameter-related errors."""

    sql: Optional[str]

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        """Initialize with optional SQL context."""
        detail_message = message
        if sql:
            detail_message = f"{message}\nSQL: {sql}"
        super().__init__(detail=detail_message)
        self.sql = sql


class MalformedPlaceholderError(ParameterError):
    """Raised in strict mode when ``:`` is not followed by an identifier."""

    position: int

    def __init__(self, position: int, sql: Optional[str] = None) -> None:
        super().__init__(f"Malformed named placeholder at offset {position}: ':' must be followed by an identifier", sql)
        self.position = position


class ArityMismatchError(ParameterError):
    """Raised when positional values do not match the placeholder count."""

    expected: int
    actual: int

    def __init__(self, expected: int, actual: int, sql: Optional[str] = None, message: Optional[str] = None) -> None:
        if message is None:
            message = f"SQL expects {expected} positional parameters but {actual} were provided"
        super().__init__(message, sql)
        self.expected = expected
        self.actual = actual


class UnboundPlaceholderError(ParameterError):
    """Raised when a named placeholder was never given a value."""

    name: str
    occurrence_index: int

    def __init__(self, name: str, occurrence_index: int, sql: Optional[str] = None) -> None:
        super().__init__(f"No value bound for placeholder ':{name}' (occurrence {occurrence_index})", sql)
        self.name = name
        self.occurrence_index = occurrence_index
