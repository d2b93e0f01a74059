from typing import Optional

from .base import DriveDeployError


class DeployError(DriveDeployError):
    """Raised when a deploy step fails. The underlying error is chained as __cause__."""

    def __init__(self, step: str, message: str):
        self.step = step
        super().__init__(message)


class OrphanedUploadError(DeployError):
    """
    Raised when the new file was uploaded but could not be moved out of the
    temporary folder. The file stays there until someone removes it.
    """

    def __init__(self, file_id: str, temp_folder_id: str, reason: Optional[str] = None):
        self.file_id = file_id
        self.temp_folder_id = temp_folder_id
        message = f"upload succeeded, but move failed: file {file_id} left in folder {temp_folder_id}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__("move", message)
