from .base import (
    DriveDeployError, ValidationError, NetworkError, DecodeError,
    MissingFieldError, AuthenticationError, APIError
)
from .auth import NoAccessTokenError, ConsentFlowError
from .drive import DriveApiError, DrivePermissionError, DriveFileNotFoundError
from .deploy import DeployError, OrphanedUploadError

__all__ = [
    "DriveDeployError",
    "ValidationError",
    "NetworkError",
    "DecodeError",
    "MissingFieldError",
    "AuthenticationError",
    "APIError",
    "NoAccessTokenError",
    "ConsentFlowError",
    "DriveApiError",
    "DrivePermissionError",
    "DriveFileNotFoundError",
    "DeployError",
    "OrphanedUploadError",
]
