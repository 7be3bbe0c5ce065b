"""
Custom exceptions for the EV charge tracker.

Route handlers raise these for problems they can describe to the caller and
convert them to JSON error responses locally.
"""


class ChargeTrackerError(Exception):
    """Base exception for all charge tracker errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class ValidationError(ChargeTrackerError):
    """Request input is missing or malformed."""

    def __init__(self, message: str, field: str = None, value=None, code=None):
        details = {}
        if field:
            details['field'] = field
        if value is not None:
            details['value'] = value
        super().__init__(message, details)
        self.field = field
        self.value = value
        self.code = code


class ConfigurationError(ChargeTrackerError):
    """Invalid or missing configuration."""

    def __init__(self, message: str, config_key: str = None):
        details = {}
        if config_key:
            details['config_key'] = config_key
        super().__init__(message, details)
        self.config_key = config_key
