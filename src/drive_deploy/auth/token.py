"""
Refresh-token exchange against the Google OAuth2 token endpoint.

Every call goes to the network; nothing is cached. Callers that need a token
for a longer session simply exchange again.
"""

import json
import logging
from dataclasses import dataclass
from typing import Optional, Any

from google.auth import exceptions as google_auth_exceptions
from google.auth.transport.requests import Request

from ..exceptions import NetworkError, DecodeError, NoAccessTokenError
from ..utils.log_sanitizer import sanitize_for_logging, sanitize_token

logger = logging.getLogger(__name__)

TOKEN_URI = "https://oauth2.googleapis.com/token"
REFRESH_GRANT_TYPE = "refresh_token"


@dataclass
class AccessToken:
    """
    A short-lived bearer token.
    Args:
        token: The opaque bearer string.
        expires_in: Lifetime in seconds, as reported by the token endpoint.
        token_type: Always "Bearer" for Google.
    """
    token: str
    expires_in: Optional[int] = None
    token_type: str = "Bearer"

    def authorization_header(self) -> str:
        return f"{self.token_type} {self.token}"

    def __str__(self):
        return f"{self.token_type} {sanitize_token(self.token)}"

    def __repr__(self):
        return f"AccessToken(token={sanitize_token(self.token)!r}, expires_in={self.expires_in!r})"


class TokenExchanger:
    """
    Exchanges an OAuth2 refresh token for an access token.

    The HTTP transport is a google.auth transport callable, so tests (or
    callers with their own session) can pass any object with the
    ``request(url, method, body, headers)`` shape.
    """

    def __init__(
            self,
            client_id: str,
            client_secret: str,
            refresh_token: str,
            request: Optional[Any] = None,
            token_uri: str = TOKEN_URI
    ):
        """
        Args:
            client_id: OAuth client id
            client_secret: OAuth client secret
            refresh_token: Long-lived refresh token for the user
            request: google.auth transport callable (defaults to a requests-backed one)
            token_uri: Token endpoint
        """
        self._client_id = client_id
        self._client_secret = client_secret
        self._refresh_token = refresh_token
        self._request = request or Request()
        self._token_uri = token_uri

    def _payload(self) -> bytes:
        return json.dumps({
            "client_id": self._client_id,
            "client_secret": self._client_secret,
            "refresh_token": self._refresh_token,
            "grant_type": REFRESH_GRANT_TYPE,
        }).encode("utf-8")

    def exchange(self) -> AccessToken:
        """
        POST the refresh grant and decode the response.

        Returns:
            The AccessToken issued by the endpoint.

        Raises:
            NetworkError: The request did not complete.
            DecodeError: The body is not a JSON object.
            NoAccessTokenError: The body has no (or an empty) access_token.
        """
        sanitized = sanitize_for_logging(
            client_id=self._client_id, refresh_token=self._refresh_token
        )
        logger.info(
            "Exchanging refresh token %s for client %s",
            sanitized['refresh_token'], sanitized['client_id']
        )

        try:
            response = self._request(
                url=self._token_uri,
                method="POST",
                body=self._payload(),
                headers={"Content-Type": "application/json"},
            )
        except google_auth_exceptions.TransportError as e:
            raise NetworkError(f"token request failed: {e}") from e

        data = response.data
        try:
            if isinstance(data, bytes):
                data = data.decode("utf-8")
            token_response = json.loads(data)
        except ValueError as e:
            raise DecodeError(f"failed to decode token response: {e}") from e

        if not isinstance(token_response, dict):
            raise DecodeError("failed to decode token response: expected a JSON object")

        access_token = token_response.get("access_token")
        if not access_token:
            detail = token_response.get("error_description") or token_response.get("error")
            message = "no access_token in response"
            if detail:
                message = f"{message} (status {response.status}: {detail})"
            raise NoAccessTokenError(message)

        token = AccessToken(
            token=access_token,
            expires_in=token_response.get("expires_in"),
            token_type=token_response.get("token_type") or "Bearer",
        )
        logger.info("Obtained access token %s, expires in %s seconds", sanitize_token(token.token), token.expires_in)
        return token


def get_google_access_token(
        client_id: str,
        client_secret: str,
        refresh_token: str,
        request: Optional[Any] = None
) -> str:
    """Exchange a refresh token and return the bare access token string."""
    return TokenExchanger(client_id, client_secret, refresh_token, request=request).exchange().token
