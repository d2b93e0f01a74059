import pytest
import sys
from pathlib import Path
from unittest.mock import Mock

import httplib2
from googleapiclient.errors import HttpError

# Add the src directory to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

# Drive resource methods and the HTTP verb each one issues
DRIVE_METHOD_VERBS = {
    "list": "GET",
    "create": "POST",
    "update": "PATCH",
    "delete": "DELETE",
}


def make_http_error(status: int, content: bytes = b'{"error": {"message": "boom"}}') -> HttpError:
    """Build the HttpError googleapiclient raises for a non-2xx response."""
    return HttpError(httplib2.Response({"status": status}), content)


def drive_calls(mock_files):
    """Names of the Drive methods called on files(), in call order."""
    return [
        name for name, _args, _kwargs in mock_files.mock_calls
        if name in DRIVE_METHOD_VERBS
    ]


def drive_verbs(mock_files):
    """HTTP verbs the recorded Drive calls translate to, in call order."""
    return [DRIVE_METHOD_VERBS[name] for name in drive_calls(mock_files)]


@pytest.fixture
def mock_drive_service():
    """Mock Drive service for testing."""
    mock_service = Mock()
    mock_files = Mock()
    mock_service.files.return_value = mock_files
    return mock_service


@pytest.fixture
def mock_files(mock_drive_service):
    """The files() collection of the mock Drive service."""
    return mock_drive_service.files.return_value


@pytest.fixture
def sample_file_list_response():
    """Sample Drive files.list response with one deployed file."""
    return {
        "files": [
            {
                "id": "file_old_123",
                "name": "handbook.pdf",
                "description": "v1"
            }
        ]
    }


@pytest.fixture
def sample_upload_response():
    """Sample Drive files.create response requested with fields=id."""
    return {"id": "file_new_456"}


@pytest.fixture
def sample_move_response():
    """Sample Drive files.update response requested with fields=id,parents."""
    return {"id": "file_new_456", "parents": ["final_folder"]}


@pytest.fixture
def source_dir(tmp_path):
    """Directory holding handbook.pdf."""
    (tmp_path / "handbook.pdf").write_bytes(b"%PDF-1.4\n% test document\n")
    return tmp_path


@pytest.fixture
def token_response():
    """Factory for google.auth transport responses."""
    def _make(data, status=200):
        response = Mock()
        response.status = status
        response.headers = {"content-type": "application/json"}
        response.data = data
        return response
    return _make
