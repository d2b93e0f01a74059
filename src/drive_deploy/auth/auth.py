import logging
from typing import Any, Optional

import httplib2
import google_auth_httplib2
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build

from ..exceptions import ValidationError, ConsentFlowError
from .token import TOKEN_URI

logger = logging.getLogger(__name__)

SCOPES = [
    'https://www.googleapis.com/auth/drive',
]


def credentials_from_access_token(access_token: str) -> Credentials:
    """
    Wrap an already exchanged bearer token.

    The resulting credentials cannot refresh themselves; callers re-exchange
    when the token expires.
    """
    if not access_token:
        raise ValidationError("access token is not set")
    return Credentials(token=access_token)


def credentials_from_refresh_token(client_id: str, client_secret: str, refresh_token: str,
                                   scopes: list = None, access_token: Optional[str] = None) -> Credentials:
    """
    Build credentials that google-auth refreshes on demand.

    Args:
        client_id: OAuth client id
        client_secret: OAuth client secret
        refresh_token: Stored refresh token
        scopes: OAuth scopes the refresh token was granted
        access_token: Already exchanged token to start with, if any

    Returns:
        Credentials that refresh on the first request (or on a 401 when
        access_token was given).
    """
    return Credentials(
        token=access_token or None,
        refresh_token=refresh_token,
        token_uri=TOKEN_URI,
        client_id=client_id,
        client_secret=client_secret,
        scopes=scopes or SCOPES,
    )


def authorized_http_for_token(access_token: str, http: Optional[Any] = None) -> google_auth_httplib2.AuthorizedHttp:
    """
    Authorized transport for a bare bearer token.

    The token cannot be refreshed, so 401 responses are handed back to the
    caller as they are instead of triggering a refresh attempt.
    """
    return google_auth_httplib2.AuthorizedHttp(
        credentials_from_access_token(access_token),
        http=http if http is not None else httplib2.Http(),
        refresh_status_codes=(),
    )


def get_drive_service(credentials: Credentials) -> Any:
    """Build a Drive v3 service from the bundled discovery document."""
    return build("drive", "v3", credentials=credentials, cache_discovery=False)


def get_drive_service_for_token(access_token: str, service: Optional[Any] = None) -> Any:
    """Return the injected service, or build one authorized with the bearer token."""
    if service is not None:
        return service
    return build("drive", "v3", http=authorized_http_for_token(access_token), cache_discovery=False)


def run_consent_flow(client_secrets_path: str, scopes: list = None, port: int = 8080) -> Credentials:
    """
    Run the installed-app OAuth flow once to obtain a refresh token.

    Args:
        client_secrets_path: Path to the OAuth client JSON downloaded from Cloud Console
        scopes: Scopes to request
        port: Local port for the redirect listener (0 picks a free one)

    Returns:
        Credentials carrying the refresh token to store as GOOGLE_REFRESH_TOKEN.

    Raises:
        ValidationError: The client secrets file is missing or malformed.
        ConsentFlowError: Google issued no refresh token.
    """
    scopes = scopes or SCOPES
    logger.info("Starting OAuth2 consent flow with scopes %s", scopes)
    try:
        flow = InstalledAppFlow.from_client_secrets_file(client_secrets_path, scopes)
    except (OSError, ValueError) as e:
        raise ValidationError(f"could not load client secrets from '{client_secrets_path}': {e}") from e
    # offline + consent makes Google issue a refresh token even on re-consent
    creds = flow.run_local_server(port=port, access_type="offline", prompt="consent")
    if not creds.refresh_token:
        raise ConsentFlowError("consent flow completed without a refresh token")
    logger.info("OAuth2 consent flow completed successfully")
    return creds
