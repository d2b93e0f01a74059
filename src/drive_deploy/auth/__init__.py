from .token import AccessToken, TokenExchanger, get_google_access_token, TOKEN_URI
from .auth import (
    SCOPES, credentials_from_access_token, credentials_from_refresh_token, authorized_http_for_token,
    get_drive_service, get_drive_service_for_token, run_consent_flow
)

__all__ = [
    "AccessToken",
    "TokenExchanger",
    "get_google_access_token",
    "TOKEN_URI",
    "SCOPES",
    "credentials_from_access_token",
    "credentials_from_refresh_token",
    "authorized_http_for_token",
    "get_drive_service",
    "get_drive_service_for_token",
    "run_consent_flow",
]
