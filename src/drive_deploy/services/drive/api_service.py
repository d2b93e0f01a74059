import os
import logging
from typing import Optional, List, Any

import httplib2
from google.auth.exceptions import RefreshError, TransportError
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseUpload

from ...auth.auth import get_drive_service_for_token
from ...exceptions import (
    DriveDeployError, ValidationError, NetworkError, DecodeError, AuthenticationError,
    DriveApiError, DrivePermissionError, DriveFileNotFoundError
)
from ...utils.log_sanitizer import sanitize_for_logging, sanitize_file_id
from .types import DriveFileRecord, MoveResult, SharingRestrictionResult
from . import utils
from .constants import SEARCH_FIELDS, UPLOAD_FIELDS, MOVE_FIELDS, SHARING_RESTRICTIONS

logger = logging.getLogger(__name__)


def _api_error(error: HttpError, action: str) -> DriveApiError:
    status = error.resp.status
    body = error.content
    if isinstance(body, bytes):
        body = body.decode("utf-8", errors="replace")
    message = f"{action} failed: status {status}: {body}"
    if status == 403:
        return DrivePermissionError(message, status_code=status, body=body)
    elif status == 404:
        return DriveFileNotFoundError(message, status_code=status, body=body)
    return DriveApiError(message, status_code=status, body=body)


class DriveApiService:
    """
    Service layer for the Drive v3 calls a deploy needs.

    Wraps a discovery-built Drive resource; every googleapiclient failure is
    translated into the drive_deploy exception hierarchy here.
    """

    def __init__(self, service: Any):
        """
        Initialize Drive service.

        Args:
            service: The Drive API service instance (googleapiclient Resource)
        """
        self._service = service

    def _execute(self, request: Any, action: str) -> Any:
        try:
            return request.execute()
        except HttpError as e:
            raise _api_error(e, action) from e
        except RefreshError as e:
            raise AuthenticationError(f"{action} failed: access token rejected and could not be refreshed: {e}") from e
        except (TransportError, httplib2.HttpLib2Error, OSError) as e:
            raise NetworkError(f"{action} failed: {e}") from e
        except ValueError as e:
            raise DecodeError(f"{action} failed: could not decode response: {e}") from e

    # Query
    def list_files(self, name: str, folder_id: str) -> List[DriveFileRecord]:
        """
        Searches a folder for non-trashed files with an exact name.

        Args:
            name: Full file name, extension included.
            folder_id: Folder to search.

        Returns:
            Matching files in the order Drive returned them.
        """
        query = utils.build_search_query(name, folder_id)
        logger.info("Searching folder %s for '%s'", sanitize_file_id(folder_id), name)

        request = self._service.files().list(q=query, fields=SEARCH_FIELDS)
        files = utils.from_google_file_list(self._execute(request, "search"))

        logger.info("Found %d matching files", len(files))
        return files

    def find_file(self, name: str, folder_id: str) -> Optional[DriveFileRecord]:
        """Returns the first match of list_files, or None."""
        files = self.list_files(name, folder_id)
        return files[0] if files else None

    def check_remote_version_exists(self, file_name: str, folder_id: str, version_label: str) -> bool:
        """
        Checks whether <file_name>.pdf in the folder already carries the version label.

        Args:
            file_name: Base name without the .pdf extension.
            folder_id: Folder holding the deployed file.
            version_label: Expected description, compared exactly.

        Returns:
            True if the first match's description equals version_label.
        """
        if not file_name or not folder_id or not version_label:
            raise ValidationError("missing required variable(s): file_name, folder_id, version_label")

        pdf_name = utils.pdf_file_name(file_name)
        existing = self.find_file(pdf_name, folder_id)
        if existing is not None and existing.has_version(version_label):
            logger.info("Skipped: exact version already deployed (%s)", pdf_name)
            return True

        logger.info("Will deploy: new or unmatched version for %s", pdf_name)
        return False

    # Upload
    def upload_file(
            self,
            file_path: str,
            folder_id: str,
            name: Optional[str] = None,
            description: Optional[str] = None,
            mime_type: Optional[str] = None
    ) -> str:
        """
        Uploads a local file with a multipart/related request.

        Args:
            file_path: Local file to upload.
            folder_id: Parent folder for the new file.
            name: Drive name (defaults to the file's base name).
            description: Stored as the file description.
            mime_type: Content type (defaults to a guess from the extension).

        Returns:
            The id of the created file.
        """
        if not folder_id:
            raise ValidationError("folder_id is required")
        if not file_path:
            raise ValidationError("file_path is required")
        if not os.path.exists(file_path):
            raise ValidationError(f"file '{file_path}' not found")
        if os.path.isdir(file_path):
            raise ValidationError(f"file_path '{file_path}' is a directory")

        name = name or os.path.basename(file_path)
        mime_type = mime_type or utils.guess_mime_type(file_path)
        metadata = utils.build_upload_metadata(name, folder_id, description)

        logger.info(
            "Uploading '%s' (%s) to folder %s",
            name, mime_type, sanitize_file_id(folder_id)
        )

        with open(file_path, "rb") as fh:
            media = MediaIoBaseUpload(fh, mimetype=mime_type, resumable=False)
            request = self._service.files().create(
                body=metadata,
                media_body=media,
                fields=UPLOAD_FIELDS
            )
            response = self._execute(request, "upload")

        file_id = utils.require_field(response, "id")
        logger.info("Uploaded new file: ID %s", file_id)
        return file_id

    # Move, rename, delete
    def rename_file(self, file_id: str, new_name: str) -> None:
        """Renames a file in place."""
        logger.info("Renaming file %s to '%s'", sanitize_file_id(file_id), new_name)
        request = self._service.files().update(fileId=file_id, body={"name": new_name})
        self._execute(request, "rename")

    def move_file(self, file_id: str, add_parent: str, remove_parent: str) -> MoveResult:
        """
        Moves a file between folders by patching its parents.

        Args:
            file_id: File to move.
            add_parent: Destination folder id.
            remove_parent: Folder id to detach from.

        Returns:
            The decoded response; it must carry the file id.
        """
        sanitized = sanitize_for_logging(file_id=file_id, add_parent_id=add_parent, remove_parent_id=remove_parent)
        logger.info(
            "Moving file %s from %s to %s",
            sanitized['file_id'], sanitized['remove_parent_id'], sanitized['add_parent_id']
        )
        request = self._service.files().update(
            fileId=file_id,
            addParents=add_parent,
            removeParents=remove_parent,
            fields=MOVE_FIELDS
        )
        return utils.from_google_move(self._execute(request, "move"))

    def delete_file(self, file_id: str) -> None:
        """Permanently deletes a file (Drive answers 204 No Content)."""
        logger.info("Deleting file %s", sanitize_file_id(file_id))
        request = self._service.files().delete(fileId=file_id)
        self._execute(request, "delete")

    def restrict_sharing(self, file_id: str) -> SharingRestrictionResult:
        """
        Stops readers from copying and writers from re-sharing the file.

        Best effort: failures are returned on the result, never raised.
        """
        request = self._service.files().update(fileId=file_id, body=dict(SHARING_RESTRICTIONS))
        try:
            self._execute(request, "sharing restriction")
        except DriveDeployError as e:
            logger.warning("Could not restrict sharing on %s: %s", sanitize_file_id(file_id), e)
            return SharingRestrictionResult(file_id=file_id, applied=False, error=e)
        return SharingRestrictionResult(file_id=file_id)


def check_remote_version_exists(
        access_token: str,
        file_name: str,
        folder_id: str,
        version_label: str,
        service: Optional[Any] = None
) -> bool:
    """
    Token-level entry point for DriveApiService.check_remote_version_exists.

    Args:
        access_token: Bearer token.
        file_name: Base name without the .pdf extension.
        folder_id: Folder holding the deployed file.
        version_label: Expected description.
        service: Drive resource to use instead of building one from the token.
    """
    if not access_token:
        raise ValidationError("access token is not set")
    if not file_name or not folder_id or not version_label:
        raise ValidationError("missing required variable(s): file_name, folder_id, version_label")
    drive = DriveApiService(get_drive_service_for_token(access_token, service))
    return drive.check_remote_version_exists(file_name, folder_id, version_label)


def upload_file_to_drive(
        access_token: str,
        folder_id: str,
        file_path: str,
        service: Optional[Any] = None
) -> str:
    """
    Uploads one local file into a folder and returns the new file id.

    All arguments are validated, and the path is checked to be an existing
    regular file, before any request is made.
    """
    if not access_token:
        raise ValidationError("access token is required")
    if not folder_id:
        raise ValidationError("folder_id is required")
    if not file_path:
        raise ValidationError("file_path is required")
    if not os.path.exists(file_path):
        raise ValidationError(f"file '{file_path}' not found")
    if os.path.isdir(file_path):
        raise ValidationError(f"file_path '{file_path}' is a directory")
    drive = DriveApiService(get_drive_service_for_token(access_token, service))
    return drive.upload_file(file_path, folder_id)
