# tests/test_services/test_extraction_client.py

import base64
import json
import re
from unittest.mock import AsyncMock, MagicMock

import pytest

from sheetscan.exceptions import ExtractionError
from sheetscan.services.extraction_client import (
    ExtractionClient,
    current_timestamp,
    file_to_generative_part,
)

FIXED_NOW = "2025-11-21T08:30:00.000Z"
RECORDS = [{"frontLabor": "1910_OB6_TJ-650", "tonnage": 1250}]


@pytest.fixture
def mock_genai(mocker):
    return mocker.patch('sheetscan.services.extraction_client.genai')


@pytest.fixture
def sheet_file(tmp_path):
    path = tmp_path / "sheet.png"
    path.write_bytes(b"\x89PNG fake image bytes")
    return path


@pytest.fixture
def extraction_client(mock_genai, mocker):
    """ExtractionClient whose Gemini model is a mock with an async generate_content_async."""
    mocker.patch(
        'sheetscan.services.extraction_client.current_timestamp', return_value=FIXED_NOW)
    client = ExtractionClient(api_key="test_gemini_key", model_name="gemini-test-model")
    client.model.generate_content_async = AsyncMock()
    return client


def _respond_with(client, text):
    response = MagicMock()
    response.text = text
    client.model.generate_content_async.return_value = response


def test_client_initialization(mock_genai):
    client = ExtractionClient(api_key="test_gemini_key", model_name="gemini-test-model")
    mock_genai.configure.assert_called_once_with(api_key="test_gemini_key")
    mock_genai.GenerativeModel.assert_called_once_with("gemini-test-model")
    assert client.model is mock_genai.GenerativeModel.return_value
    assert client.model_name == "gemini-test-model"


def test_client_initialization_default_model(mock_genai):
    ExtractionClient(api_key="test_gemini_key")
    mock_genai.GenerativeModel.assert_called_once_with("gemini-2.0-flash-lite")


def test_client_initialization_missing_key(mock_genai):
    with pytest.raises(ValueError, match="API key"):
        ExtractionClient(api_key="")
    mock_genai.configure.assert_not_called()


def test_file_to_generative_part(sheet_file):
    part = file_to_generative_part(str(sheet_file), "image/png")
    assert part["mime_type"] == "image/png"
    assert base64.b64decode(part["data"]) == sheet_file.read_bytes()


def test_current_timestamp_format():
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", current_timestamp())


async def test_extract_plain_json(extraction_client, sheet_file):
    _respond_with(extraction_client, json.dumps(RECORDS))
    result = await extraction_client.extract(str(sheet_file), "image/png")
    assert result == RECORDS


async def test_extract_fenced_json(extraction_client, sheet_file):
    _respond_with(extraction_client, "```json\n" + json.dumps(RECORDS) + "\n```\n")
    result = await extraction_client.extract(str(sheet_file), "image/png")
    assert result == RECORDS


async def test_extract_empty_array(extraction_client, sheet_file):
    _respond_with(extraction_client, "[]")
    assert await extraction_client.extract(str(sheet_file), "image/png") == []


async def test_extract_sends_prompt_and_inline_file(extraction_client, sheet_file):
    """One call carrying the prompt with the current date and the base64 file payload."""
    _respond_with(extraction_client, "[]")

    await extraction_client.extract(str(sheet_file), "application/pdf")

    extraction_client.model.generate_content_async.assert_awaited_once()
    prompt, part = extraction_client.model.generate_content_async.await_args.args[0]
    assert prompt.count(FIXED_NOW) >= 3
    assert f'"startDate": "{FIXED_NOW}"' in prompt
    assert f'"createdAt": "{FIXED_NOW}"' in prompt
    assert f'"updatedAt": "{FIXED_NOW}"' in prompt
    assert "ONLY" in prompt
    assert part["mime_type"] == "application/pdf"
    assert base64.b64decode(part["data"]) == sheet_file.read_bytes()


async def test_extract_invalid_json(extraction_client, sheet_file):
    _respond_with(extraction_client, "Sorry, I could not read this table.")

    with pytest.raises(ExtractionError, match="^Failed to process the file: ") as exc_info:
        await extraction_client.extract(str(sheet_file), "image/png")

    assert isinstance(exc_info.value.__cause__, json.JSONDecodeError)


async def test_extract_truncated_json_is_not_repaired(extraction_client, sheet_file):
    _respond_with(extraction_client, '```json\n[{"frontLabor": "1910_OB6_TJ-650",')
    with pytest.raises(ExtractionError):
        await extraction_client.extract(str(sheet_file), "image/png")


async def test_extract_non_array_json(extraction_client, sheet_file):
    _respond_with(extraction_client, '{"frontLabor": "1910_OB6_TJ-650"}')
    with pytest.raises(ExtractionError, match="expected a JSON array"):
        await extraction_client.extract(str(sheet_file), "image/png")


async def test_extract_api_error(extraction_client, sheet_file):
    extraction_client.model.generate_content_async.side_effect = RuntimeError("quota exceeded")

    with pytest.raises(ExtractionError, match="quota exceeded"):
        await extraction_client.extract(str(sheet_file), "image/png")

    extraction_client.model.generate_content_async.assert_awaited_once()


async def test_extract_missing_file(extraction_client, tmp_path):
    with pytest.raises(ExtractionError, match="^Failed to process the file: "):
        await extraction_client.extract(str(tmp_path / "gone.png"), "image/png")
    extraction_client.model.generate_content_async.assert_not_called()


async def test_extract_reads_file_in_threadpool(extraction_client, sheet_file, mocker):
    from starlette.concurrency import run_in_threadpool

    threadpool = mocker.patch(
        'sheetscan.services.extraction_client.run_in_threadpool', wraps=run_in_threadpool)
    _respond_with(extraction_client, "[]")

    await extraction_client.extract(str(sheet_file), "image/png")

    threadpool.assert_called_once_with(file_to_generative_part, str(sheet_file), "image/png")
