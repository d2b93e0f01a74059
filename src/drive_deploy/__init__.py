"""
drive-deploy: deploy versioned PDFs to Google Drive.

Exchanges a refresh token for an access token, then uploads, archives and
moves files with the Drive v3 API.
"""

from .auth import AccessToken, TokenExchanger, get_google_access_token
from .deploy import DeployWorkflow, DeployRequest, DeployResult, DeployStatus, deploy_pdf
from .services.drive import (
    DriveApiService, DriveFileRecord, check_remote_version_exists, upload_file_to_drive
)
from .config import DeployConfig

__version__ = "0.1.0"

__all__ = [
    "AccessToken",
    "TokenExchanger",
    "get_google_access_token",
    "DeployWorkflow",
    "DeployRequest",
    "DeployResult",
    "DeployStatus",
    "deploy_pdf",
    "DriveApiService",
    "DriveFileRecord",
    "check_remote_version_exists",
    "upload_file_to_drive",
    "DeployConfig",
]
