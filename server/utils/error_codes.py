"""
Error code taxonomy for the EV charge tracker.

Structured codes make failures easy to group in logs.

Error Code Format:
- E001-E099: Validation errors (bad input data)
- E200-E299: Database errors (connection, query failures)
"""

from enum import Enum
from typing import Optional


class ErrorCategory(str, Enum):
    """High-level error categories for grouping and alerting."""

    VALIDATION = "validation"
    DATABASE = "database"
    SYSTEM = "system"


class ErrorCode(str, Enum):
    """Structured error codes with consistent format."""

    # Validation Errors (E001-E099)
    E001_MISSING_REQUIRED_FIELD = "E001"  # Required field missing in request
    E002_INVALID_DATA_TYPE = "E002"  # Field has wrong data type
    E003_OUT_OF_RANGE = "E003"  # Value outside acceptable range
    E004_INVALID_DATE = "E004"  # Unparseable date

    # Database Errors (E200-E299)
    E200_DB_QUERY_FAILED = "E200"  # Query or commit failed
    E201_DB_CONSTRAINT_VIOLATION = "E201"  # Unique/foreign key violated
    E202_DB_CONNECTION_FAILED = "E202"  # Store unreachable


ERROR_METADATA = {
    ErrorCode.E001_MISSING_REQUIRED_FIELD: {
        "category": ErrorCategory.VALIDATION,
        "description": "Required field missing in request",
        "severity": "warning",
        "alert": False,
    },
    ErrorCode.E002_INVALID_DATA_TYPE: {
        "category": ErrorCategory.VALIDATION,
        "description": "Field has wrong data type",
        "severity": "warning",
        "alert": False,
    },
    ErrorCode.E003_OUT_OF_RANGE: {
        "category": ErrorCategory.VALIDATION,
        "description": "Value outside acceptable range",
        "severity": "warning",
        "alert": False,
    },
    ErrorCode.E004_INVALID_DATE: {
        "category": ErrorCategory.VALIDATION,
        "description": "Invalid date format",
        "severity": "warning",
        "alert": False,
    },
    ErrorCode.E200_DB_QUERY_FAILED: {
        "category": ErrorCategory.DATABASE,
        "description": "Database query failed",
        "severity": "error",
        "alert": True,
    },
    ErrorCode.E201_DB_CONSTRAINT_VIOLATION: {
        "category": ErrorCategory.DATABASE,
        "description": "Database constraint violated",
        "severity": "error",
        "alert": False,
    },
    ErrorCode.E202_DB_CONNECTION_FAILED: {
        "category": ErrorCategory.DATABASE,
        "description": "Database connection failed",
        "severity": "critical",
        "alert": True,
    },
}


def get_error_metadata(error_code: ErrorCode) -> dict:
    """Get metadata for an error code."""
    return ERROR_METADATA.get(
        error_code,
        {
            "category": ErrorCategory.SYSTEM,
            "description": "Unknown error",
            "severity": "error",
            "alert": True,
        },
    )


class StructuredError:
    """Structured error with code, category, and metadata."""

    def __init__(self, code: ErrorCode, message: str, exception: Optional[Exception] = None, **context):
        self.code = code
        self.message = message
        self.exception = exception
        self.context = context
        self.metadata = get_error_metadata(code)

    def to_dict(self) -> dict:
        """Convert to dictionary for logging."""
        error_dict = {
            "code": self.code.value,
            "category": self.metadata["category"].value,
            "message": self.message,
            "severity": self.metadata["severity"],
            "alert": self.metadata["alert"],
        }

        if self.exception:
            error_dict["exception_type"] = type(self.exception).__name__
            error_dict["exception_message"] = str(self.exception)

        if self.context:
            error_dict["context"] = self.context

        return error_dict

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"
