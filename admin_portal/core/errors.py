"""
Domain errors for the admin service.

Services raise AdminServiceError carrying one stable ErrorCode; how a code
is rendered over HTTP is decided by admin_portal.core.error_handlers.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    # Validation
    INVALID_INPUT = "INVALID_INPUT"
    MISSING_FIELD = "MISSING_FIELD"
    INVALID_EMAIL = "INVALID_EMAIL"
    INVALID_PASSWORD = "INVALID_PASSWORD"
    INVALID_GRADUATION_YEAR = "INVALID_GRADUATION_YEAR"
    INVALID_PHONE = "INVALID_PHONE"

    # Authentication & authorization
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"

    # Conflicts and dangling references
    DUPLICATE_STUDENT_ID = "DUPLICATE_STUDENT_ID"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    INVALID_ROLE = "INVALID_ROLE"
    INVALID_BRANCH = "INVALID_BRANCH"

    # Invitation codes
    INVALID_INVITATION_CODE = "INVALID_INVITATION_CODE"
    INVITATION_CODE_INACTIVE = "INVITATION_CODE_INACTIVE"
    INVITATION_CODE_EXPIRED = "INVITATION_CODE_EXPIRED"
    INVITATION_CODE_ALREADY_USED = "INVITATION_CODE_ALREADY_USED"

    # Server
    DATABASE_ERROR = "DATABASE_ERROR"
    TRANSACTION_FAILED = "TRANSACTION_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


ERROR_MESSAGES: Dict[ErrorCode, str] = {
    ErrorCode.INVALID_INPUT: "Invalid input provided",
    ErrorCode.MISSING_FIELD: "Required field is missing",
    ErrorCode.INVALID_EMAIL: "Invalid email format",
    ErrorCode.INVALID_PASSWORD: "Password does not meet security requirements",
    ErrorCode.INVALID_GRADUATION_YEAR: "Graduation year is out of range",
    ErrorCode.INVALID_PHONE: "Invalid phone number format",
    ErrorCode.UNAUTHORIZED: "Unauthorized - Missing or invalid authentication",
    ErrorCode.FORBIDDEN: "Forbidden - You do not have permission to access this resource",
    ErrorCode.NOT_FOUND: "Resource not found",
    ErrorCode.DUPLICATE_STUDENT_ID: "Student ID already exists",
    ErrorCode.DUPLICATE_EMAIL: "Email already registered",
    ErrorCode.INVALID_ROLE: "Invalid Role ID",
    ErrorCode.INVALID_BRANCH: "Invalid Branch ID",
    ErrorCode.INVALID_INVITATION_CODE: "Invitation code does not exist",
    ErrorCode.INVITATION_CODE_INACTIVE: "Invitation code is inactive",
    ErrorCode.INVITATION_CODE_EXPIRED: "Invitation code has expired",
    ErrorCode.INVITATION_CODE_ALREADY_USED: "Invitation code has already been used",
    ErrorCode.DATABASE_ERROR: "Database error occurred",
    ErrorCode.TRANSACTION_FAILED: "Transaction could not be completed",
    ErrorCode.INTERNAL_ERROR: "Internal server error",
}


class AdminServiceError(Exception):
    """
    The single failure type raised by admin services.

    Args:
        code: Stable, machine-readable error kind
        message: Human-readable message that is safe to display;
            defaults to the canonical message for the code
        details: Optional structured context
    """

    def __init__(self, code: ErrorCode, message: Optional[str] = None, details: Optional[Any] = None):
        self.code = code
        self.message = message or ERROR_MESSAGES[code]
        self.details = details
        self.timestamp = datetime.now(timezone.utc)
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }

    def __repr__(self) -> str:
        return f"AdminServiceError({self.code.value}, {self.message!r})"
