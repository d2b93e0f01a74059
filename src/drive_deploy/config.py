"""
Environment-driven configuration for the drive-deploy CLI.

The library functions take every value as an argument; this module only
collects them from the environment (and the version file) for command-line
use.
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional, Mapping, Any

from .auth.auth import credentials_from_refresh_token, get_drive_service
from .auth.token import TokenExchanger
from .exceptions import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_VERSION_FILE = "version-safe.txt"


@dataclass
class DeployConfig:
    client_id: str = ""
    client_secret: str = ""
    refresh_token: str = ""
    access_token: str = ""
    temp_folder_id: str = ""
    final_folder_id: str = ""
    archive_folder_id: str = ""
    version_label: str = ""
    version_file: str = DEFAULT_VERSION_FILE
    source_dir: str = "."

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DeployConfig":
        """
        Read the configuration from environment variables.

        Args:
            environ: Mapping to read instead of os.environ

        Returns:
            DeployConfig with empty strings for unset values
        """
        env = os.environ if environ is None else environ
        return cls(
            client_id=env.get("GOOGLE_CLIENT_ID", ""),
            client_secret=env.get("GOOGLE_CLIENT_SECRET", ""),
            refresh_token=env.get("GOOGLE_REFRESH_TOKEN", ""),
            access_token=env.get("GOOGLE_ACCESS_TOKEN", ""),
            temp_folder_id=env.get("DRIVE_TEMP_FOLDER_ID", ""),
            final_folder_id=env.get("DRIVE_FOLDER_ID", ""),
            archive_folder_id=env.get("DRIVE_ARCHIVE_FOLDER_ID", ""),
            version_label=env.get("VERSION_SUFFIX", ""),
            version_file=env.get("VERSION_FILE", DEFAULT_VERSION_FILE),
            source_dir=env.get("DEPLOY_SOURCE_DIR", "."),
        )

    def override(self, **values: Any) -> "DeployConfig":
        """Apply non-empty overrides (e.g. CLI flags) on top of this config."""
        for key, value in values.items():
            if value:
                setattr(self, key, value)
        return self

    def resolve_version_label(self) -> str:
        """
        The explicit version label, else the stripped contents of the version
        file, else the empty string.
        """
        if self.version_label:
            return self.version_label

        version_path = self.version_file
        if not os.path.isabs(version_path) and not os.path.exists(version_path):
            version_path = os.path.join(self.source_dir, version_path)
        if not os.path.isfile(version_path):
            logger.info("No version file at '%s'", version_path)
            return ""

        try:
            with open(version_path, "r", encoding="utf-8") as fh:
                return fh.read().strip()
        except (OSError, UnicodeDecodeError) as e:
            raise ValidationError(f"could not read version file '{version_path}': {e}") from e

    def resolve_access_token(self, request: Optional[Any] = None) -> str:
        """
        The configured access token, or a freshly exchanged one.

        Raises:
            ValidationError: Neither an access token nor the refresh-grant
                values are configured.
        """
        if self.access_token:
            return self.access_token

        missing = [
            name for name, value in (
                ("GOOGLE_CLIENT_ID", self.client_id),
                ("GOOGLE_CLIENT_SECRET", self.client_secret),
                ("GOOGLE_REFRESH_TOKEN", self.refresh_token),
            ) if not value
        ]
        if missing:
            raise ValidationError(f"missing required variable(s): {', '.join(missing)}")

        exchanger = TokenExchanger(self.client_id, self.client_secret, self.refresh_token, request=request)
        return exchanger.exchange().token

    def has_refresh_grant(self) -> bool:
        return bool(self.client_id and self.client_secret and self.refresh_token)

    def drive_service(self, access_token: str) -> Optional[Any]:
        """
        A Drive service whose credentials refresh themselves, when the refresh
        grant is configured. Returns None otherwise, leaving callers to build
        a bearer-token-only service.
        """
        if not self.has_refresh_grant():
            return None
        return get_drive_service(credentials_from_refresh_token(
            self.client_id, self.client_secret, self.refresh_token, access_token=access_token
        ))
