import pytest
from unittest.mock import Mock, patch

from drive_deploy.cli import main, build_parser, EXIT_OK, EXIT_FAILURE, EXIT_CONFIG
from drive_deploy.deploy import DeployResult, DeployStatus
from drive_deploy.exceptions import DeployError

ENV = {
    "GOOGLE_ACCESS_TOKEN": "ya29.preset",
    "DRIVE_TEMP_FOLDER_ID": "temp_folder",
    "DRIVE_FOLDER_ID": "final_folder",
    "VERSION_SUFFIX": "v2",
}


class TestParser:

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_deploy_names(self):
        args = build_parser().parse_args(["--archive-folder-id", "archive", "deploy", "a", "b"])
        assert args.names == ["a", "b"]
        assert args.archive_folder_id == "archive"


class TestMain:

    @patch('drive_deploy.cli.deploy_pdf')
    def test_deploy_each_name(self, mock_deploy, capsys):
        mock_deploy.side_effect = lambda token, name, version, *rest, **kwargs: DeployResult(
            status=DeployStatus.DEPLOYED, file_name=name, version_label=version, file_id=f"id-{name}"
        )

        assert main(["deploy", "a", "b"], environ=ENV) == EXIT_OK

        assert [c.args[1] for c in mock_deploy.call_args_list] == ["a", "b"]
        first = mock_deploy.call_args_list[0].args
        assert first == ("ya29.preset", "a", "v2", "temp_folder", "final_folder", "", ".")
        assert mock_deploy.call_args_list[0].kwargs == {"service": None}
        assert "deployed version v2 as id-b" in capsys.readouterr().out

    @patch('drive_deploy.cli.deploy_pdf')
    def test_deploy_failure_stops(self, mock_deploy):
        mock_deploy.side_effect = DeployError("upload", "upload failed")

        assert main(["deploy", "a", "b"], environ=ENV) == EXIT_FAILURE
        assert mock_deploy.call_count == 1

    @patch('drive_deploy.cli.check_remote_version_exists')
    def test_check_deployed(self, mock_check, capsys):
        mock_check.return_value = True
        assert main(["check", "handbook"], environ=ENV) == EXIT_OK
        mock_check.assert_called_once_with("ya29.preset", "handbook", "final_folder", "v2", service=None)
        assert capsys.readouterr().out.strip() == "deployed"

    @patch('drive_deploy.cli.check_remote_version_exists')
    def test_check_pending(self, mock_check, capsys):
        mock_check.return_value = False
        assert main(["check", "handbook"], environ=ENV) == EXIT_FAILURE
        assert capsys.readouterr().out.strip() == "pending"

    @patch('drive_deploy.cli.upload_file_to_drive')
    def test_upload_uses_folder_flag(self, mock_upload, capsys):
        mock_upload.return_value = "new_id"
        assert main(["--folder-id", "other_folder", "upload", "notes.txt"], environ=ENV) == EXIT_OK
        mock_upload.assert_called_once_with("ya29.preset", "other_folder", "notes.txt", service=None)
        assert capsys.readouterr().out.strip() == "new_id"

    def test_token_without_credentials_is_config_error(self):
        assert main(["token"], environ={}) == EXIT_CONFIG

    def test_token_prints_preset(self, capsys):
        assert main(["token"], environ=ENV) == EXIT_OK
        assert capsys.readouterr().out.strip() == "ya29.preset"

    @patch('drive_deploy.cli.run_consent_flow')
    def test_authorize(self, mock_flow, capsys):
        mock_flow.return_value = Mock(refresh_token="1//refresh")
        assert main(["authorize", "--client-secrets", "secrets.json", "--port", "0"], environ={}) == EXIT_OK
        mock_flow.assert_called_once_with("secrets.json", port=0)
        assert capsys.readouterr().out.strip() == "1//refresh"

    def test_authorize_missing_client_secrets_is_config_error(self, tmp_path):
        missing = str(tmp_path / "nope.json")
        assert main(["authorize", "--client-secrets", missing], environ={}) == EXIT_CONFIG

    @patch('drive_deploy.cli.deploy_pdf')
    def test_unreadable_version_file_is_config_error(self, mock_deploy, tmp_path):
        (tmp_path / "version-safe.txt").write_bytes(b"\xff\xfe\xfa")
        env = {k: v for k, v in ENV.items() if k != "VERSION_SUFFIX"}
        env["DEPLOY_SOURCE_DIR"] = str(tmp_path)

        assert main(["deploy", "handbook"], environ=env) == EXIT_CONFIG
        mock_deploy.assert_not_called()

    @patch('drive_deploy.config.get_drive_service')
    @patch('drive_deploy.cli.check_remote_version_exists')
    def test_refresh_grant_builds_refreshing_service(self, mock_check, mock_get_service):
        env = dict(ENV, GOOGLE_CLIENT_ID="cid", GOOGLE_CLIENT_SECRET="secret", GOOGLE_REFRESH_TOKEN="refresh")
        mock_check.return_value = True

        assert main(["check", "handbook"], environ=env) == EXIT_OK

        assert mock_check.call_args.kwargs["service"] is mock_get_service.return_value
        creds = mock_get_service.call_args.args[0]
        assert creds.token == "ya29.preset"
        assert creds.refresh_token == "refresh"
