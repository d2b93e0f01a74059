from typing import Optional


class DriveDeployError(Exception):
    """Base exception for all drive-deploy errors."""
    pass


class ValidationError(DriveDeployError):
    """Raised when input validation fails."""
    pass


class NetworkError(DriveDeployError):
    """Raised when a request never produced an HTTP response."""
    pass


class DecodeError(DriveDeployError):
    """Raised when a response body is not the JSON we expected."""
    pass


class MissingFieldError(DriveDeployError):
    """Raised when a well-formed response lacks a required field."""

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"response is missing required field '{field}'")


class AuthenticationError(DriveDeployError):
    """Raised when authentication fails."""
    pass


class APIError(DriveDeployError):
    """Raised when API calls fail with a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(message)
