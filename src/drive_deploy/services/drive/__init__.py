"""Drive v3 service layer."""

from .api_service import DriveApiService, check_remote_version_exists, upload_file_to_drive
from .types import DriveFileRecord, MoveResult, SharingRestrictionResult

__all__ = [
    # Service layer
    "DriveApiService",
    "check_remote_version_exists",
    "upload_file_to_drive",

    # Data types
    "DriveFileRecord",
    "MoveResult",
    "SharingRestrictionResult",
]
