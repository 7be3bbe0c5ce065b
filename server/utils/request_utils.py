"""
Request parsing and error response helpers shared by the blueprints.

Parsers raise ``ValidationError``; handlers turn that into a 400. Store
failures go through ``database_error_response`` which rolls back, logs and
answers 500 with the underlying message.
"""

import logging
import math

from exceptions import ValidationError
from flask import jsonify, request
from sqlalchemy.exc import IntegrityError, OperationalError

from utils.error_codes import ErrorCode, StructuredError
from utils.time_utils import parse_datetime

logger = logging.getLogger(__name__)


def get_json_body():
    """Return the JSON request body as a dict."""
    data = request.get_json(silent=True)
    if not data or not isinstance(data, dict):
        raise ValidationError("No data provided", code=ErrorCode.E001_MISSING_REQUIRED_FIELD)
    return data


def _is_missing(value):
    return value is None or (isinstance(value, str) and not value.strip())


def optional_int(source, name):
    """Read an integer identifier; None when absent."""
    value = source.get(name)
    if _is_missing(value):
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be an integer", field=name, value=value)
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer", field=name, value=value)


def require_int(source, name):
    value = optional_int(source, name)
    if value is None:
        raise ValidationError(f"{name} is required", field=name, code=ErrorCode.E001_MISSING_REQUIRED_FIELD)
    return value


def optional_number(source, name):
    """Read a finite number; None when absent."""
    value = source.get(name)
    if _is_missing(value):
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{name} must be a valid number", field=name, value=value)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be a valid number", field=name, value=value)
    if not math.isfinite(number):
        raise ValidationError(f"{name} must be a finite number", field=name, value=value)
    return number


def require_text(source, name):
    value = source.get(name)
    if _is_missing(value):
        raise ValidationError(f"{name} is required", field=name, code=ErrorCode.E001_MISSING_REQUIRED_FIELD)
    return str(value).strip()


def optional_datetime(source, name):
    value = source.get(name)
    if _is_missing(value):
        return None
    parsed = parse_datetime(str(value))
    if parsed is None:
        raise ValidationError(f"Invalid {name}", field=name, value=value, code=ErrorCode.E004_INVALID_DATE)
    return parsed


def bounded_int(source, name, default, minimum, maximum):
    """Read an integer query parameter constrained to [minimum, maximum]."""
    value = optional_int(source, name)
    if value is None:
        return default
    if value < minimum or value > maximum:
        raise ValidationError(
            f"{name} must be between {minimum} and {maximum}",
            field=name,
            value=value,
            code=ErrorCode.E003_OUT_OF_RANGE,
        )
    return value


def validation_error_response(error: ValidationError, event=None):
    """400 response for a client input error."""
    code = error.code or ErrorCode.E002_INVALID_DATA_TYPE
    if event is not None:
        event.add_error(StructuredError(code, error.message, field=error.field))
        event.emit(level="warning", force=True)

    body = {"error": error.message}
    if error.field:
        body["field"] = error.field
    return jsonify(body), 400


def database_error_response(db, error: Exception, operation: str, event=None):
    """
    Roll back and convert a store failure into a 500 response.

    The message is the driver's error text without the SQL statement.
    """
    if db is not None:
        db.rollback()

    detail = str(getattr(error, "orig", None) or error)

    if isinstance(error, IntegrityError):
        code = ErrorCode.E201_DB_CONSTRAINT_VIOLATION
    elif isinstance(error, OperationalError):
        code = ErrorCode.E202_DB_CONNECTION_FAILED
    else:
        code = ErrorCode.E200_DB_QUERY_FAILED

    structured_error = StructuredError(code, f"{operation} failed", exception=error)
    logger.error(f"{structured_error}: {detail}")

    if event is not None:
        event.add_error(structured_error, operation=operation)
        event.emit(level="error", force=True)

    return jsonify({"error": f"Database error: {detail}"}), 500
