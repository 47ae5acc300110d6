"""Errors raised by the query layer and mapped to JSON-RPC error codes."""

from __future__ import annotations

from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND

# Server-defined code; JSON-RPC reserves -32000..-32099 for implementations.
NOT_FOUND = -32001

__all__ = [
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "METHOD_NOT_FOUND",
    "NOT_FOUND",
    "QueryError",
    "InvalidParamsError",
    "ComponentNotFoundError",
]


class QueryError(Exception):
    """Base class for errors reported to tool callers."""

    code = INTERNAL_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_error(self) -> dict:
        return {"code": self.code, "message": self.message}


class InvalidParamsError(QueryError):
    code = INVALID_PARAMS


class ComponentNotFoundError(QueryError):
    code = NOT_FOUND
