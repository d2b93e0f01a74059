"""
Command-line entry point.

Usage:
    drive-deploy token
    drive-deploy check NAME
    drive-deploy --folder-id ID upload PATH
    drive-deploy deploy NAME [NAME ...]
    drive-deploy authorize --client-secrets client_secrets.json

Values not given as flags are read from the environment (see DeployConfig).
"""

import sys
import argparse
import logging
from typing import Optional, List, Mapping

from .auth.auth import run_consent_flow
from .config import DeployConfig
from .deploy import deploy_pdf
from .exceptions import DriveDeployError, ValidationError
from .services.drive import check_remote_version_exists, upload_file_to_drive

logger = logging.getLogger("drive_deploy")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="drive-deploy",
        description="Deploy versioned PDFs to a Google Drive folder."
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--folder-id", dest="final_folder_id", help="Final folder id (DRIVE_FOLDER_ID)")
    parser.add_argument("--temp-folder-id", help="Temporary folder id (DRIVE_TEMP_FOLDER_ID)")
    parser.add_argument("--archive-folder-id", help="Archive folder id (DRIVE_ARCHIVE_FOLDER_ID)")
    parser.add_argument("--version-label", help="Version label (VERSION_SUFFIX)")
    parser.add_argument("--version-file", help="File holding the version label (VERSION_FILE)")
    parser.add_argument("--source-dir", help="Directory holding the PDFs (DEPLOY_SOURCE_DIR)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("token", help="Print a fresh access token")

    check = subparsers.add_parser("check", help="Exit 0 if the version is already deployed")
    check.add_argument("name", help="File name without the .pdf extension")

    upload = subparsers.add_parser("upload", help="Upload a single file")
    upload.add_argument("path", help="Local file to upload")

    deploy = subparsers.add_parser("deploy", help="Deploy one or more PDFs")
    deploy.add_argument("names", nargs="+", help="File names without the .pdf extension")

    authorize = subparsers.add_parser("authorize", help="Obtain a refresh token via the browser")
    authorize.add_argument("--client-secrets", required=True, help="OAuth client JSON from Cloud Console")
    authorize.add_argument("--port", type=int, default=8080, help="Local redirect port (0 picks a free one)")

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _cmd_token(config: DeployConfig, args: argparse.Namespace) -> int:
    print(config.resolve_access_token())
    return EXIT_OK


def _cmd_check(config: DeployConfig, args: argparse.Namespace) -> int:
    access_token = config.resolve_access_token()
    deployed = check_remote_version_exists(
        access_token, args.name, config.final_folder_id, config.resolve_version_label(),
        service=config.drive_service(access_token)
    )
    print("deployed" if deployed else "pending")
    return EXIT_OK if deployed else EXIT_FAILURE


def _cmd_upload(config: DeployConfig, args: argparse.Namespace) -> int:
    access_token = config.resolve_access_token()
    print(upload_file_to_drive(
        access_token, config.final_folder_id, args.path, service=config.drive_service(access_token)
    ))
    return EXIT_OK


def _cmd_deploy(config: DeployConfig, args: argparse.Namespace) -> int:
    access_token = config.resolve_access_token()
    version_label = config.resolve_version_label()
    service = config.drive_service(access_token)
    for name in args.names:
        result = deploy_pdf(
            access_token,
            name,
            version_label,
            config.temp_folder_id,
            config.final_folder_id,
            config.archive_folder_id,
            config.source_dir,
            service=service,
        )
        print(result)
    return EXIT_OK


def _cmd_authorize(config: DeployConfig, args: argparse.Namespace) -> int:
    creds = run_consent_flow(args.client_secrets, port=args.port)
    print(creds.refresh_token)
    return EXIT_OK


COMMANDS = {
    "token": _cmd_token,
    "check": _cmd_check,
    "upload": _cmd_upload,
    "deploy": _cmd_deploy,
    "authorize": _cmd_authorize,
}


def main(argv: Optional[List[str]] = None, environ: Optional[Mapping[str, str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    config = DeployConfig.from_env(environ).override(
        final_folder_id=args.final_folder_id,
        temp_folder_id=args.temp_folder_id,
        archive_folder_id=args.archive_folder_id,
        version_label=args.version_label,
        version_file=args.version_file,
        source_dir=args.source_dir,
    )

    try:
        return COMMANDS[args.command](config, args)
    except ValidationError as e:
        logger.error("%s", e)
        return EXIT_CONFIG
    except DriveDeployError as e:
        logger.error("%s failed: %s", args.command, e)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
