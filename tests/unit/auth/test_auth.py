import pytest
from unittest.mock import Mock, patch

import google_auth_httplib2
from google.oauth2.credentials import Credentials

from drive_deploy.auth.auth import (
    SCOPES, credentials_from_access_token, credentials_from_refresh_token, authorized_http_for_token,
    get_drive_service, get_drive_service_for_token, run_consent_flow
)
from drive_deploy.auth.token import TOKEN_URI
from drive_deploy.exceptions import ValidationError, ConsentFlowError


@pytest.mark.unit
@pytest.mark.auth
class TestCredentials:

    def test_credentials_from_access_token(self):
        creds = credentials_from_access_token("ya29.abc")
        assert isinstance(creds, Credentials)
        assert creds.token == "ya29.abc"
        assert creds.refresh_token is None

    def test_credentials_from_empty_access_token(self):
        with pytest.raises(ValidationError, match="access token is not set"):
            credentials_from_access_token("")

    def test_credentials_from_refresh_token(self):
        creds = credentials_from_refresh_token("cid", "secret", "refresh")
        assert creds.token is None
        assert creds.refresh_token == "refresh"
        assert creds.client_id == "cid"
        assert creds.client_secret == "secret"
        assert creds.token_uri == TOKEN_URI
        assert creds.scopes == SCOPES

    def test_credentials_from_refresh_token_with_current_token(self):
        creds = credentials_from_refresh_token("cid", "secret", "refresh", access_token="ya29.current")
        assert creds.token == "ya29.current"
        assert creds.refresh_token == "refresh"


@pytest.mark.unit
@pytest.mark.auth
class TestDriveServiceFactory:

    @patch('drive_deploy.auth.auth.build')
    def test_get_drive_service(self, mock_build):
        creds = Mock()
        service = get_drive_service(creds)
        mock_build.assert_called_once_with("drive", "v3", credentials=creds, cache_discovery=False)
        assert service is mock_build.return_value

    @patch('drive_deploy.auth.auth.build')
    def test_injected_service_is_used_as_is(self, mock_build):
        injected = Mock()
        assert get_drive_service_for_token("ya29.abc", injected) is injected
        mock_build.assert_not_called()

    @patch('drive_deploy.auth.auth.build')
    def test_service_built_from_token(self, mock_build):
        get_drive_service_for_token("ya29.abc")
        http = mock_build.call_args.kwargs["http"]
        assert http.credentials.token == "ya29.abc"

    def test_bearer_only_http_does_not_refresh(self):
        http = authorized_http_for_token("ya29.abc", http=Mock())
        assert isinstance(http, google_auth_httplib2.AuthorizedHttp)
        assert tuple(http._refresh_status_codes) == ()

    def test_bearer_only_http_requires_token(self):
        with pytest.raises(ValidationError):
            authorized_http_for_token("")


@pytest.mark.unit
@pytest.mark.auth
class TestConsentFlow:

    @patch('drive_deploy.auth.auth.InstalledAppFlow.from_client_secrets_file')
    def test_returns_credentials_with_refresh_token(self, mock_from_file):
        creds = Mock(refresh_token="1//refresh")
        mock_from_file.return_value.run_local_server.return_value = creds

        assert run_consent_flow("client_secrets.json", port=0) is creds
        mock_from_file.assert_called_once_with("client_secrets.json", SCOPES)
        mock_from_file.return_value.run_local_server.assert_called_once_with(
            port=0, access_type="offline", prompt="consent"
        )

    @patch('drive_deploy.auth.auth.InstalledAppFlow.from_client_secrets_file')
    def test_missing_refresh_token(self, mock_from_file):
        mock_from_file.return_value.run_local_server.return_value = Mock(refresh_token=None)

        with pytest.raises(ConsentFlowError):
            run_consent_flow("client_secrets.json")

    def test_missing_client_secrets_file(self, tmp_path):
        with pytest.raises(ValidationError, match="could not load client secrets"):
            run_consent_flow(str(tmp_path / "nope.json"))

    def test_malformed_client_secrets_file(self, tmp_path):
        secrets = tmp_path / "client_secrets.json"
        secrets.write_text('{"service_account": {}}')
        with pytest.raises(ValidationError):
            run_consent_flow(str(secrets))
