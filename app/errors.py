"""Structured error helpers for API responses."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


def build_error_payload(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    payload = {"error": {"code": code, "message": message}}
    if details is not None:
        payload["error"]["details"] = details
    return payload


class AppError(Exception):
    """Application-scoped error for standardized API responses."""

    def __init__(self, status_code: int, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.payload = build_error_payload(code, message, details)


class StoreError(Exception):
    """Any failure surfaced by the task store client.

    Raised for connection failures, constraint violations, unknown
    tables/columns and missing rows on a required point lookup.
    """

    def __init__(self, message: str, table: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.table = table

    def __str__(self) -> str:
        if self.table:
            return f"{self.table}: {self.message}"
        return self.message


class TaskOperationError(AppError):
    """A task mutation failed; ``operation`` names which one."""

    MESSAGES = {
        "create": "Failed to create task",
        "update": "Failed to update task",
        "update_status": "Failed to update task status",
        "delete": "Failed to delete task",
    }

    def __init__(self, operation: str, reason: Optional[str] = None):
        message = self.MESSAGES.get(operation, f"Failed to {operation} task")
        details = {"operation": operation}
        if reason:
            details["reason"] = reason
        super().__init__(502, f"{operation}_failed", message, details)
        self.operation = operation


async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.payload)


async def store_error_handler(_: Request, exc: StoreError) -> JSONResponse:
    logger.error("Store error: %s", exc)
    return JSONResponse(
        status_code=502,
        content=build_error_payload("store_error", "Task store request failed", {"reason": str(exc)}),
    )

