# HR Analytics - Intern, Housing and Department Analytics Backend
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Database connection and schema status schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..core.db_errors import ClassifiedError


class ErrorInfo(BaseModel):
    """Serializable view of a classified database error."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
    )

    type: str = Field(..., description="connection, query or database")
    message: str
    code: str | None = None
    human_readable: str | None = None
    suggested_fix: str | None = None
    table: str | None = None

    @classmethod
    def from_classified(cls, error: ClassifiedError) -> "ErrorInfo":
        return cls(
            type=error.source.value,
            message=error.message,
            code=error.code,
            human_readable=error.human_readable,
            suggested_fix=error.suggested_fix,
            table=error.table,
        )


class ConnectionTestResponse(BaseModel):
    """Result of the connection test endpoint."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
    )

    success: bool
    message: str
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    target: str | None = Field(None, description="Connection target without credentials")
    error: ErrorInfo | None = None


class TablePermission(BaseModel):
    """Read permission check for one table."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    read: bool
    error: str | None = None


class DatabaseStatusReport(BaseModel):
    """Connection, schema and permission diagnostics."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
    )

    db_connection: bool
    current_settings: dict[str, Any] = Field(default_factory=dict)
    table_status: dict[str, bool] = Field(default_factory=dict)
    schema_info: dict[str, list[dict[str, Any]]] = Field(default_factory=dict)
    permissions: dict[str, TablePermission] = Field(default_factory=dict)
    errors: list[ErrorInfo] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    pool: dict[str, Any] = Field(default_factory=dict, description="Pool statistics")
