"""
Exam Command Centre - API errors
Exception types of the API and the handlers turning them into JSON
"""

import logging
from typing import Any, Dict, Optional, Sequence

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dashboard.core.data_manager import DataManagerError

logger = logging.getLogger(__name__)

# ===== EXCEPTIONS =====

class ApiException(Exception):
    """Base API error, rendered as ``{"error": reason, "status_code": status}``"""
    status_code = 500
    reason = "internal_error"

    def __init__(self, reason: Optional[str] = None):
        super().__init__(reason or self.reason)
        if reason:
            self.reason = reason

class ValidationFailure(ApiException):
    status_code = 400
    reason = "invalid_request"

class NotFound(ApiException):
    status_code = 404
    reason = "not_found"

class PayloadTooLarge(ApiException):
    status_code = 413
    reason = "payload_too_large"

# ===== VALIDATION REASON CODES =====

FIELD_REASONS = {
    "title": "title_required",
    "done": "done_boolean_required",
    "notes": "notes_string_required",
    "label": "exam_fields_string_required",
}

# Body missing altogether: the reason depends on the endpoint
BODY_REASONS = {
    ("POST", "tasks"): "title_required",
    ("PATCH", "tasks"): "done_boolean_required",
    ("PUT", "notes"): "notes_string_required",
    ("PUT", "exam"): "exam_fields_string_required",
}

def _resource(path: str, method: str) -> str:
    parts = [p for p in path.split("/") if p]
    if method in ("PATCH", "DELETE") and len(parts) >= 2:
        return parts[-2]
    return parts[-1] if parts else ""

def validation_reason(errors: Sequence[Dict[str, Any]], method: str, path: str) -> str:
    """Pick the machine-readable reason for a request validation error."""
    for error in errors:
        loc = tuple(error.get("loc", ()))
        if error.get("type") == "json_invalid":
            return "invalid_request"
        if len(loc) >= 2 and loc[0] == "body":
            field = loc[1]
            if field == "date":
                return "exam_fields_string_required" if error.get("type") == "string_type" else "date_invalid"
            if field in FIELD_REASONS:
                return FIELD_REASONS[field]

    return BODY_REASONS.get((method, _resource(path, method)), "invalid_request")

def error_response(status_code: int, reason: str, details: Any = None) -> JSONResponse:
    content = {"error": reason, "status_code": status_code}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)

# ===== HANDLERS =====

async def api_exception_handler(request: Request, exc: ApiException):
    return error_response(exc.status_code, exc.reason)

async def request_validation_handler(request: Request, exc: RequestValidationError):
    reason = validation_reason(exc.errors(), request.method, request.url.path)
    logger.debug(f"Rejected {request.method} {request.url.path}: {reason}")
    return error_response(400, reason)

async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    reasons = {404: "not_found", 405: "method_not_allowed"}
    return error_response(exc.status_code, reasons.get(exc.status_code, str(exc.detail)))

async def data_manager_error_handler(request: Request, exc: DataManagerError):
    logger.error(f"❌ Storage error on {request.method} {request.url.path}: {exc}")
    return error_response(500, "storage_error")

def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiException, api_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(DataManagerError, data_manager_error_handler)
