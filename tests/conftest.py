# tests/conftest.py

import os

import pytest
from fastapi.testclient import TestClient

from sheetscan import create_app
from sheetscan.config import Config
from sheetscan.services.extraction_client import ExtractionClient


@pytest.fixture(scope='session', autouse=True)
def setup_test_env_vars():
    """
    Make sure a dummy Gemini key is present so Config() never reads a real one.
    Tests that need the key missing remove it with monkeypatch.
    """
    previous = os.environ.get('GEMINI_API_KEY')
    os.environ['GEMINI_API_KEY'] = 'test_gemini_key'

    yield

    if previous is None:
        del os.environ['GEMINI_API_KEY']
    else:
        os.environ['GEMINI_API_KEY'] = previous


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    """A throwaway uploads directory, also exported as UPLOAD_DIR."""
    path = tmp_path / "uploads"
    monkeypatch.setenv('UPLOAD_DIR', str(path))
    return path


@pytest.fixture
def test_config(upload_dir):
    return Config()


@pytest.fixture
def mock_extraction_client(mocker):
    """
    Stand-in for the Gemini client; ``extract`` is an AsyncMock returning no
    records unless a test says otherwise.
    """
    client = mocker.Mock(spec=ExtractionClient)
    client.model_name = "gemini-test-model"
    client.extract = mocker.AsyncMock(return_value=[])
    return client


@pytest.fixture
def app(test_config, mock_extraction_client):
    return create_app(config=test_config, extraction_client=mock_extraction_client)


@pytest.fixture
def app_client(app, mock_extraction_client):
    """FastAPI test client wired to the mocked extraction client."""
    with TestClient(app) as client:
        yield client, mock_extraction_client
