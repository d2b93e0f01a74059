from .base import APIError


class DriveApiError(APIError):
    """Base exception for Drive API errors."""
    pass


class DrivePermissionError(DriveApiError):
    """Raised when the token lacks access to a file or folder."""
    pass


class DriveFileNotFoundError(DriveApiError):
    """Raised when a file or folder id does not exist."""
    pass
