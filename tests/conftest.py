"""Shared fixtures: isolate tests from the caller's MOONDREAM_* environment."""
from unittest.mock import MagicMock

import pytest
import requests

import config

API_KEY = "test_api_key_123"
IMAGE_URL = "https://example.com/image.jpg"
BASE_URL = "https://api.moondream.ai/v1"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("API_KEY", "CAPTION_LENGTH", "CAPTION_STREAM", "LOG_LEVEL"):
        monkeypatch.delenv(f"MOONDREAM_{name}", raising=False)
    config.reset_config()
    yield
    config.reset_config()


def make_response(body="", status: int = 200, content_type="application/json") -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response.headers["Content-Type"] = content_type
    response.encoding = requests.utils.get_encoding_from_headers(response.headers)
    response._content = body if isinstance(body, bytes) else body.encode("utf-8")
    return response


def make_stream_response(chunks, content_type="application/json", encoding=None) -> MagicMock:
    response = MagicMock()
    response.status_code = 200
    response.headers = {"Content-Type": content_type}
    response.encoding = encoding
    response.iter_content.return_value = iter(chunks)
    return response
