from dataclasses import dataclass, field
from typing import Optional, List

from ...utils.log_sanitizer import sanitize_file_id


@dataclass
class DriveFileRecord:
    """
    A file found by a Drive search.
    Args:
        file_id: The unique identifier for the file.
        name: The name of the file.
        description: The file description. Deployed files keep their version label here.
    """
    file_id: str
    name: str = ""
    description: str = ""

    def has_version(self, version_label: str) -> bool:
        """Exact, case-sensitive comparison against the stored version label."""
        return self.description == version_label

    def to_dict(self) -> dict:
        return {
            "id": self.file_id,
            "name": self.name,
            "description": self.description,
        }

    def __repr__(self):
        return f"DriveFileRecord(id={self.file_id!r}, name={self.name!r}, description={self.description!r})"


@dataclass
class MoveResult:
    """
    Decoded response of a parents PATCH.
    Args:
        file_id: The moved file.
        parents: Folder ids the file sits in after the move.
    """
    file_id: str
    parents: List[str] = field(default_factory=list)

    def is_in_folder(self, folder_id: str) -> bool:
        return folder_id in self.parents


@dataclass
class SharingRestrictionResult:
    """
    Outcome of the best-effort sharing restriction.
    Args:
        file_id: The file the restriction was applied to.
        applied: True when Drive accepted the patch.
        error: The failure, when the patch did not go through.
    """
    file_id: str
    applied: bool = True
    error: Optional[Exception] = None

    def __str__(self):
        if self.applied:
            return f"sharing restricted on {sanitize_file_id(self.file_id)}"
        return f"sharing restriction failed on {sanitize_file_id(self.file_id)}: {self.error}"
