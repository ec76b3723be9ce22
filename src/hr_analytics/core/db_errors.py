"""Database error classification.

Turns any failure raised while talking to PostgreSQL into a
``ClassifiedError``: which side failed (connection, query, or the database
in general), a human readable explanation and, where one is known, a
suggested fix. Classification is diagnostic only and never changes control
flow; ``process_db_error`` never raises.

Error codes follow two vocabularies:

* PostgreSQL SQLSTATE codes (``42P01``, ``28P01``, ...) taken from
  ``asyncpg.PostgresError.sqlstate``.
* Symbolic socket error names (``ECONNREFUSED``, ``ECONNRESET``,
  ``ETIMEDOUT``, ``ENOTFOUND``) derived from ``OSError`` instances.
"""

import errno
import re
import socket
from enum import Enum

from attrs import evolve, field, frozen
from beartype import beartype

UNKNOWN_ERROR_MESSAGE = "Unknown database error"

# Socket level codes
CONNECTION_REFUSED = "ECONNREFUSED"
CONNECTION_RESET = "ECONNRESET"
TIMED_OUT = "ETIMEDOUT"
HOST_NOT_FOUND = "ENOTFOUND"

# SQLSTATE codes
INVALID_AUTHORIZATION = "28000"
INVALID_PASSWORD = "28P01"
INSUFFICIENT_PRIVILEGE = "42501"
UNDEFINED_TABLE = "42P01"
UNDEFINED_COLUMN = "42703"
INVALID_CATALOG_NAME = "3D000"

_TABLE_NAME_PATTERNS = (
    re.compile(r'relation "([^"]+)" does not exist'),
    re.compile(r'table "([^"]+)" does not exist'),
)


class ErrorSource(str, Enum):
    """Which side of the data path a failure belongs to."""

    CONNECTION = "connection"
    QUERY = "query"
    DATABASE = "database"


@frozen
class ClassifiedError:
    """Immutable diagnosis of a database failure."""

    message: str = field()
    source: ErrorSource = field(default=ErrorSource.DATABASE)
    code: str | None = field(default=None)
    name: str | None = field(default=None)
    detail: str | None = field(default=None)
    hint: str | None = field(default=None)
    severity: str | None = field(default=None)
    table: str | None = field(default=None)
    column: str | None = field(default=None)
    human_readable: str | None = field(default=None)
    suggested_fix: str | None = field(default=None)

    @property
    def is_connection_error(self) -> bool:
        return self.source is ErrorSource.CONNECTION

    def as_log_line(self) -> str:
        """Render a one-line summary for log output."""
        parts = [f"[{self.source.value}]"]
        if self.code:
            parts.append(f"code={self.code}")
        parts.append(self.human_readable or self.message)
        if self.suggested_fix:
            parts.append(f"(fix: {self.suggested_fix})")
        return " ".join(parts)


@beartype
def extract_table_name(message: str) -> str | None:
    """Best-effort extraction of the missing table from an error message."""
    for pattern in _TABLE_NAME_PATTERNS:
        match = pattern.search(message)
        if match:
            return match.group(1)
    return None


def _text_attr(error: BaseException, *names: str) -> str | None:
    for name in names:
        value = getattr(error, name, None)
        if isinstance(value, str) and value:
            return value
    return None


@beartype
def error_code_of(error: BaseException) -> str | None:
    """Return the machine error code carried by an exception, if any."""
    sqlstate = _text_attr(error, "sqlstate")
    if sqlstate:
        return sqlstate

    if isinstance(error, socket.gaierror):
        return HOST_NOT_FOUND
    if isinstance(error, TimeoutError):
        return TIMED_OUT
    if isinstance(error, OSError) and error.errno in errno.errorcode:
        return errno.errorcode[error.errno]

    return _text_attr(error, "code")


def _message_of(error: BaseException) -> str:
    message = str(error)
    if message:
        return message
    if isinstance(error, TimeoutError):
        return "Connection timeout"
    return type(error).__name__


def _classify_by_code(error: ClassifiedError) -> ClassifiedError:
    code = error.code
    message = error.message

    if code in (CONNECTION_REFUSED, TIMED_OUT, HOST_NOT_FOUND):
        return evolve(
            error,
            source=ErrorSource.CONNECTION,
            human_readable="Unable to connect to database server",
            suggested_fix=(
                "Check that database server is running and network "
                "connectivity is available"
            ),
        )

    if code in (INVALID_AUTHORIZATION, INVALID_PASSWORD):
        return evolve(
            error,
            source=ErrorSource.CONNECTION,
            human_readable="Authentication failed - incorrect username or password",
            suggested_fix="Check DB_USER and DB_PASSWORD environment variables",
        )

    if code == INSUFFICIENT_PRIVILEGE:
        target = f"table {error.table}" if error.table else "database object"
        fix = (
            f"Grant appropriate permissions with: GRANT SELECT ON {error.table} TO your_user;"
            if error.table
            else "Grant appropriate permissions to the database user"
        )
        return evolve(
            error,
            source=ErrorSource.QUERY,
            human_readable=f"Permission denied for {target}",
            suggested_fix=fix,
        )

    if code == UNDEFINED_TABLE:
        table = extract_table_name(message) or error.table
        return evolve(
            error,
            source=ErrorSource.QUERY,
            table=table,
            human_readable=f"Table {table or 'specified'} does not exist",
            suggested_fix=(
                "Create the missing table or update queries to use existing schema"
            ),
        )

    if code == UNDEFINED_COLUMN:
        return evolve(
            error,
            source=ErrorSource.QUERY,
            human_readable=f"Column {error.column or 'specified'} does not exist",
            suggested_fix="Check column name or update table schema",
        )

    if code == INVALID_CATALOG_NAME:
        return evolve(
            error,
            source=ErrorSource.CONNECTION,
            human_readable="Database does not exist",
            suggested_fix="Check DB_NAME environment variable and create database if needed",
        )

    # Unrecognized code: fall back to the message text
    if "permission denied" in message:
        return evolve(
            error,
            source=ErrorSource.QUERY,
            human_readable="Permission denied for database operation",
            suggested_fix="Grant appropriate permissions to the database user",
        )
    if "does not exist" in message:
        return evolve(
            error,
            source=ErrorSource.QUERY,
            human_readable="Database object does not exist",
            suggested_fix="Check that tables and columns referenced in queries exist",
        )
    if "timeout" in message:
        return evolve(
            error,
            source=ErrorSource.CONNECTION,
            human_readable="Database operation timed out",
            suggested_fix="Check database server performance and network connectivity",
        )

    return error


@beartype
def process_db_error(error: object) -> ClassifiedError:
    """Classify an arbitrary failure value.

    Args:
        error: Exception raised by the driver or the network stack, a plain
            error string, or anything else a caller caught.

    Returns:
        ClassifiedError: Always populated; ``human_readable`` falls back to
        the raw message when no rule matches.
    """
    if isinstance(error, str):
        classified = ClassifiedError(message=error)
    elif isinstance(error, BaseException):
        classified = ClassifiedError(
            message=_message_of(error),
            name=type(error).__name__,
        )
        code = error_code_of(error)
        if code is not None:
            classified = evolve(
                classified,
                code=code,
                detail=_text_attr(error, "detail"),
                hint=_text_attr(error, "hint"),
                severity=_text_attr(error, "severity"),
                table=_text_attr(error, "table_name", "table"),
                column=_text_attr(error, "column_name", "column"),
            )
            classified = _classify_by_code(classified)
    else:
        classified = ClassifiedError(message=UNKNOWN_ERROR_MESSAGE)

    if not classified.human_readable:
        classified = evolve(classified, human_readable=classified.message)

    return classified
