# =============================================================================
# app/exceptions.py - Custom Exceptions and Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error carries a machine-readable code, an HTTP status and, where
# possible, a suggestion telling the caller how to fix the request.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class DirectoryException(Exception):
    """
    Base exception for the directory API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "DIRECTORY_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Request Exceptions (4xx)
# =============================================================================

class ValidationError(DirectoryException):
    """Raised when a submission is missing required fields or has bad values."""

    def __init__(self, message: str, fields: list[str] | None = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            suggestion="Provide every required field with a non-empty value",
            details={"fields": fields} if fields else None,
        )
        self.fields = fields or []


class NotFoundError(DirectoryException):
    """Raised when a referenced tool, recruiter, comment or vote doesn't exist."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(
            message=f"{entity.capitalize()} not found: {entity_id}",
            code="NOT_FOUND",
            status_code=404,
            suggestion=f"Check that the {entity} id is correct",
            details={"entity": entity, "id": entity_id},
        )
        self.entity = entity
        self.entity_id = entity_id


class InvalidTransitionError(DirectoryException):
    """Raised when a status change is requested from a terminal state."""

    def __init__(self, item_id: str, current: str, requested: str):
        super().__init__(
            message=f"Cannot move item {item_id} from '{current}' to '{requested}'",
            code="INVALID_TRANSITION",
            status_code=409,
            suggestion="Only pending items can be approved or rejected",
            details={"id": item_id, "current_status": current, "requested_status": requested},
        )
        self.item_id = item_id
        self.current = current
        self.requested = requested


class DuplicateSubmissionError(DirectoryException):
    """Raised when single-vote enforcement is on and the submitter already voted."""

    def __init__(self, tool_id: str, user_email: str):
        super().__init__(
            message=f"{user_email} has already voted on tool {tool_id}",
            code="DUPLICATE_SUBMISSION",
            status_code=409,
            suggestion="Each email may vote once per tool",
            details={"tool_id": tool_id, "user_email": user_email},
        )


# =============================================================================
# Upstream Exceptions (5xx)
# =============================================================================

class UpstreamError(DirectoryException):
    """
    Raised when a call to the hosted database fails.

    The service's own message is passed through unchanged so operators can
    diagnose the failure. Nothing is retried.
    """

    def __init__(self, message: str, operation: str, table: str):
        super().__init__(
            message=message,
            code="UPSTREAM_ERROR",
            status_code=502,
            suggestion="Check the database service status and retry the request",
            details={"operation": operation, "table": table},
        )
        self.operation = operation
        self.table = table


# =============================================================================
# Exception Handlers
# =============================================================================

async def directory_exception_handler(
    request: Request,
    exc: DirectoryException
) -> JSONResponse:
    """
    Convert DirectoryException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Render request body/query schema violations."""
    return JSONResponse(
        status_code=422,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": [
                {"loc": list(err.get("loc", [])), "msg": err.get("msg")}
                for err in exc.errors()
            ],
        }
    )
