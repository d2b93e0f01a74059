import mimetypes
from typing import Optional, Dict, Any, List

from ...exceptions import DecodeError, MissingFieldError
from .constants import PDF_EXTENSION, DEFAULT_MIME_TYPE, UNKNOWN_VERSION
from .types import DriveFileRecord, MoveResult


def escape_query_value(value: str) -> str:
    """
    Escape a literal for use inside single quotes in a Drive query.

    Args:
        value: Raw string (file name or folder id)

    Returns:
        The string with backslashes and single quotes escaped
    """
    return value.replace("\\", "\\\\").replace("'", "\\'")


def build_search_query(name: str, folder_id: str) -> str:
    """
    Build the Drive search for a non-trashed file with an exact name in a folder.

    Example:
        build_search_query("guide.pdf", "abc") ->
        "'abc' in parents and name='guide.pdf' and trashed=false"
    """
    return (
        f"'{escape_query_value(folder_id)}' in parents"
        f" and name='{escape_query_value(name)}'"
        f" and trashed=false"
    )


def pdf_file_name(file_name: str) -> str:
    return file_name + PDF_EXTENSION


def archived_file_name(file_name: str, description: Optional[str]) -> str:
    """
    Name an old version gets when it is moved to the archive folder.

    Args:
        file_name: Base name without extension
        description: Version label stored on the old file

    Returns:
        "<file_name>-<description>.pdf", with "unknown" standing in for an
        empty or "null" description
    """
    version = description
    if not version or version == "null":
        version = UNKNOWN_VERSION
    return pdf_file_name(f"{file_name}-{version}")


def guess_mime_type(file_path: str) -> str:
    """Content type from the file extension, falling back to application/octet-stream."""
    mime_type, _ = mimetypes.guess_type(file_path)
    return mime_type or DEFAULT_MIME_TYPE


def build_upload_metadata(name: str, folder_id: str, description: Optional[str] = None) -> Dict[str, Any]:
    """JSON metadata part of a multipart upload."""
    metadata = {
        "name": name,
        "parents": [folder_id],
    }
    if description:
        metadata["description"] = description
    return metadata


def require_field(response: Any, field: str) -> Any:
    """
    Return a non-empty field from a decoded response.

    Raises:
        DecodeError: The response is not a JSON object.
        MissingFieldError: The field is absent or empty.
    """
    if not isinstance(response, dict):
        raise DecodeError(f"expected a JSON object, got {type(response).__name__}")
    value = response.get(field)
    if not value:
        raise MissingFieldError(field)
    return value


def from_google_file(google_file: Dict[str, Any]) -> DriveFileRecord:
    """
    Creates a DriveFileRecord from one entry of a files.list response.

    Args:
        google_file: A dictionary with id, name and description keys.

    Returns:
        A DriveFileRecord; description defaults to the empty string.
    """
    return DriveFileRecord(
        file_id=require_field(google_file, "id"),
        name=google_file.get("name") or "",
        description=google_file.get("description") or "",
    )


def from_google_file_list(response: Any) -> List[DriveFileRecord]:
    """Decode a files.list response into records, keeping Drive's order."""
    if not isinstance(response, dict):
        raise DecodeError(f"expected a JSON object, got {type(response).__name__}")
    files = response.get("files") or []
    if not isinstance(files, list):
        raise DecodeError("'files' is not a list")
    return [from_google_file(google_file) for google_file in files]


def from_google_move(response: Any) -> MoveResult:
    """Decode a parents PATCH response requested with fields=id,parents."""
    return MoveResult(
        file_id=require_field(response, "id"),
        parents=list(response.get("parents") or []),
    )
