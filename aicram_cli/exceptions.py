from __future__ import annotations

from typing import Dict, Optional, Tuple


class AicramError(Exception):
    """Base exception with user-friendly message."""
    pass


class ConfigError(AicramError):
    pass


class ApiError(AicramError):
    pass


class AuthenticationError(ApiError):
    pass


# Backend error codes that point at a single form field.
FIELD_ERRORS: Dict[str, Tuple[str, str]] = {
    "user_error": ("user_id", "User not found"),
    "matrix_error": ("matrix_id", "Matrix not found"),
    "organization_error": ("organization_id", "Organization not found"),
    "assessment_error": ("assessment_id", "Assessment not found"),
    "email_error": ("email", "Email already exists"),
    "username_error": ("username", "Username already exists"),
    "invalid_password": ("current_password", "Current password is incorrect"),
}


class BackendError(ApiError):
    """Non-2xx response carrying an ``{"error": <code>}`` body."""

    def __init__(self, code: str, status_code: int) -> None:
        self.code = code
        self.status_code = status_code
        mapped = FIELD_ERRORS.get(code)
        if mapped:
            message = mapped[1]
        else:
            message = f"AI-CRAM API rejected the request ({status_code}): {code}"
        super().__init__(message)

    @property
    def field(self) -> Optional[str]:
        mapped = FIELD_ERRORS.get(self.code)
        return mapped[0] if mapped else None


class ValidationError(AicramError):
    def __init__(self, errors: Dict[str, str]) -> None:
        self.errors = dict(errors)
        details = "; ".join(f"{k}: {v}" for k, v in self.errors.items())
        super().__init__(f"Validation failed. {details}")


class WizardError(AicramError):
    pass


class WizardBusyError(WizardError):
    pass


class InputFileError(AicramError):
    pass
