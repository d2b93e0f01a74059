"""
PDF deploy workflow.

A deploy puts <file_name>.pdf into the final folder with its version label in
the description. The new file is uploaded into a temporary folder first and
only moved into the final folder once it exists, so readers of the final
folder never see a half-written upload.

    search final folder
      -> same version already there: done
      -> older version there: archive it (rename + move) or delete it
    upload into temp folder
    restrict sharing (best effort)
    move temp -> final
"""

import os
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Any

from ..auth.auth import get_drive_service_for_token
from ..exceptions import DriveDeployError, ValidationError, DeployError, OrphanedUploadError
from ..services.drive import DriveApiService, DriveFileRecord, SharingRestrictionResult
from ..services.drive import utils
from ..services.drive.constants import PDF_MIME_TYPE
from ..utils.log_sanitizer import sanitize_for_logging, sanitize_file_id

logger = logging.getLogger(__name__)


class DeployStatus(Enum):
    DEPLOYED = "deployed"
    SKIPPED = "skipped"


class PreviousVersionAction(Enum):
    NONE = "none"
    ARCHIVED = "archived"
    DELETED = "deleted"


@dataclass
class DeployRequest:
    """
    Everything one deploy needs.
    Args:
        file_name: Base name; the deployed file is <file_name>.pdf.
        version_label: Stored as the file description.
        temp_folder_id: Folder the upload lands in before it is moved.
        final_folder_id: Folder readers look in.
        archive_folder_id: Where old versions go; when empty they are deleted.
        source_dir: Local directory holding <file_name>.pdf.
    """
    file_name: str
    version_label: str
    temp_folder_id: str
    final_folder_id: str
    archive_folder_id: Optional[str] = None
    source_dir: str = "."

    @property
    def pdf_name(self) -> str:
        return utils.pdf_file_name(self.file_name)

    @property
    def pdf_path(self) -> str:
        return os.path.join(self.source_dir, self.pdf_name)

    def validate(self) -> None:
        """
        Raises ValidationError unless the request can be deployed.
        Checks run in order: required ids, local file, version label.
        """
        if not self.file_name or not self.temp_folder_id or not self.final_folder_id:
            raise ValidationError(
                "missing required variable(s): file_name, temp_folder_id, final_folder_id"
            )
        if not os.path.isfile(self.pdf_path):
            raise ValidationError(f"PDF '{self.pdf_path}' not found")
        if not self.version_label:
            raise ValidationError("version label is empty: set VERSION_SUFFIX or fill the version file")


@dataclass
class DeployResult:
    status: DeployStatus
    file_name: str
    version_label: str
    file_id: Optional[str] = None
    previous: Optional[DriveFileRecord] = None
    previous_action: PreviousVersionAction = PreviousVersionAction.NONE
    archived_name: Optional[str] = None
    sharing: Optional[SharingRestrictionResult] = None

    @property
    def skipped(self) -> bool:
        return self.status is DeployStatus.SKIPPED

    def __str__(self):
        if self.skipped:
            return f"{self.file_name}: version {self.version_label} already deployed"
        return f"{self.file_name}: deployed version {self.version_label} as {self.file_id}"


class DeployWorkflow:
    """
    Runs deploys against one Drive service.

    Nothing is retried and nothing is rolled back: once the old version has
    been archived or deleted, a failing upload leaves the final folder
    without the file.
    """

    def __init__(self, drive: DriveApiService):
        self._drive = drive

    def deploy(self, request: DeployRequest) -> DeployResult:
        request.validate()

        sanitized = sanitize_for_logging(
            temp_folder_id=request.temp_folder_id,
            final_folder_id=request.final_folder_id,
            archive_folder_id=request.archive_folder_id
        )
        logger.info(
            "Deploying %s version %s (temp=%s, final=%s, archive=%s)",
            request.pdf_name, request.version_label, sanitized['temp_folder_id'],
            sanitized['final_folder_id'], sanitized['archive_folder_id']
        )

        existing = self._run_step(
            "search", "failed to query existing file",
            self._drive.find_file, request.pdf_name, request.final_folder_id
        )

        if existing is not None and existing.has_version(request.version_label):
            logger.info("Skipped: version %s of %s already deployed", request.version_label, request.pdf_name)
            return DeployResult(
                status=DeployStatus.SKIPPED,
                file_name=request.file_name,
                version_label=request.version_label,
                file_id=existing.file_id,
                previous=existing,
            )

        result = DeployResult(
            status=DeployStatus.DEPLOYED,
            file_name=request.file_name,
            version_label=request.version_label,
            previous=existing,
        )

        if existing is not None and request.archive_folder_id:
            result.archived_name = self._archive(existing, request)
            result.previous_action = PreviousVersionAction.ARCHIVED
        elif existing is not None:
            logger.warning(
                "No archive folder set; existing file %s (version %s) will be deleted",
                sanitize_file_id(existing.file_id), existing.description or "unknown"
            )
            self._run_step(
                "delete", "failed to delete existing file",
                self._drive.delete_file, existing.file_id
            )
            result.previous_action = PreviousVersionAction.DELETED
        else:
            logger.info("No existing version found")

        result.file_id = self._run_step(
            "upload", "upload failed",
            self._drive.upload_file,
            request.pdf_path,
            request.temp_folder_id,
            name=request.pdf_name,
            description=request.version_label,
            mime_type=PDF_MIME_TYPE,
        )

        result.sharing = self._drive.restrict_sharing(result.file_id)

        try:
            moved = self._drive.move_file(result.file_id, request.final_folder_id, request.temp_folder_id)
        except DriveDeployError as e:
            logger.error(
                "Uploaded file %s is orphaned in temp folder %s and needs manual cleanup",
                result.file_id, request.temp_folder_id
            )
            raise OrphanedUploadError(result.file_id, request.temp_folder_id, str(e)) from e

        if moved.parents and not moved.is_in_folder(request.final_folder_id):
            logger.warning(
                "Move of %s reported parents %s, final folder not among them",
                result.file_id, moved.parents
            )

        logger.info("Deployment successful: %s moved to final folder", request.pdf_name)
        return result

    def _archive(self, existing: DriveFileRecord, request: DeployRequest) -> str:
        archived_name = utils.archived_file_name(request.file_name, existing.description)
        self._run_step(
            "rename", "failed to rename existing file",
            self._drive.rename_file, existing.file_id, archived_name
        )
        self._run_step(
            "archive", "failed to move old file to archive",
            self._drive.move_file, existing.file_id, request.archive_folder_id, request.final_folder_id
        )
        logger.info("Archived old version as '%s'", archived_name)
        return archived_name

    @staticmethod
    def _run_step(step: str, message: str, func, *args, **kwargs) -> Any:
        try:
            return func(*args, **kwargs)
        except DriveDeployError as e:
            raise DeployError(step, f"{message}: {e}") from e


def deploy_pdf(
        access_token: str,
        file_name: str,
        version_label: str,
        temp_folder_id: str,
        final_folder_id: str,
        archive_folder_id: Optional[str] = None,
        source_dir: str = ".",
        service: Optional[Any] = None
) -> DeployResult:
    """
    Deploys <source_dir>/<file_name>.pdf into the final folder.

    Args:
        access_token: Bearer token for Drive.
        file_name: Base name without extension.
        version_label: Version stored in the file description.
        temp_folder_id: Staging folder for the upload.
        final_folder_id: Destination folder.
        archive_folder_id: Folder for the replaced version; when empty the old file is deleted.
        source_dir: Local directory holding the PDF.
        service: Drive resource to use instead of building one from the token.

    Returns:
        A DeployResult; SKIPPED when the same version is already live.
    """
    request = DeployRequest(
        file_name=file_name,
        version_label=version_label,
        temp_folder_id=temp_folder_id,
        final_folder_id=final_folder_id,
        archive_folder_id=archive_folder_id,
        source_dir=source_dir,
    )
    if not access_token:
        raise ValidationError(
            "missing required variable(s): file_name, access_token, temp_folder_id, final_folder_id"
        )
    request.validate()

    drive = DriveApiService(get_drive_service_for_token(access_token, service))
    return DeployWorkflow(drive).deploy(request)
