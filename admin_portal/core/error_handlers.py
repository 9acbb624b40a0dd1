import logging
from typing import Any, Dict

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from admin_portal.config import settings
from admin_portal.core.errors import AdminServiceError, ErrorCode

logger = logging.getLogger(__name__)

# Transport mapping for domain error kinds
STATUS_BY_CODE: Dict[ErrorCode, int] = {
    ErrorCode.INVALID_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.MISSING_FIELD: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_EMAIL: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_PASSWORD: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_GRADUATION_YEAR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_PHONE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.DUPLICATE_STUDENT_ID: status.HTTP_409_CONFLICT,
    ErrorCode.DUPLICATE_EMAIL: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_ROLE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_BRANCH: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_INVITATION_CODE: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVITATION_CODE_INACTIVE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVITATION_CODE_EXPIRED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVITATION_CODE_ALREADY_USED: status.HTTP_409_CONFLICT,
    ErrorCode.DATABASE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCode.TRANSACTION_FAILED: status.HTTP_409_CONFLICT,
    ErrorCode.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

def status_for(code: ErrorCode) -> int:
    return STATUS_BY_CODE.get(code, status.HTTP_500_INTERNAL_SERVER_ERROR)

def error_response(error: AdminServiceError) -> JSONResponse:
    body: Dict[str, Any] = {"success": False, "error": error.to_dict()}
    return JSONResponse(status_code=status_for(error.code), content=body)

async def admin_service_error_handler(request: Request, exc: AdminServiceError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path} failed: {exc.code.value} - {exc.message}")
    return error_response(exc)

async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Translate pydantic validation failures into the domain taxonomy.

    A missing required field maps to MISSING_FIELD, schema validators that
    raise PydanticCustomError with an ErrorCode name as the error type keep
    that code, and everything else maps to INVALID_INPUT.
    """
    errors = exc.errors()
    first = errors[0] if errors else {}
    error_type = first.get("type")
    if error_type == "missing":
        code = ErrorCode.MISSING_FIELD
    elif error_type in ErrorCode.__members__:
        code = ErrorCode(error_type)
    else:
        code = ErrorCode.INVALID_INPUT

    # loc starts with "body"/"path"; model-level errors have no field part
    field = ".".join(str(part) for part in first.get("loc", ())[1:])
    message = first.get("msg", "Invalid input provided")
    if field:
        message = f"{field}: {message}"

    logger.info(f"Rejected {request.method} {request.url.path}: {code.value} - {message}")
    return error_response(AdminServiceError(code, message))

async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = {
        status.HTTP_401_UNAUTHORIZED: ErrorCode.UNAUTHORIZED,
        status.HTTP_403_FORBIDDEN: ErrorCode.FORBIDDEN,
        status.HTTP_404_NOT_FOUND: ErrorCode.NOT_FOUND,
    }.get(exc.status_code, ErrorCode.INVALID_INPUT if exc.status_code < 500 else ErrorCode.INTERNAL_ERROR)
    body = {"success": False, "error": AdminServiceError(code, str(exc.detail)).to_dict()}
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))

async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    details = None if settings.is_production else {"originalError": str(exc)}
    return error_response(AdminServiceError(ErrorCode.INTERNAL_ERROR, details=details))

def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AdminServiceError, admin_service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
