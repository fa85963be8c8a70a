"""CLI tests: dispatch, stdout, exit codes."""
from unittest.mock import patch

import pytest
import requests

from conftest import API_KEY, BASE_URL, IMAGE_URL, make_response, make_stream_response
from moondream.main import main


def test_query_prints_body(capsys):
    body = '{"answer":"a cat"}'
    with patch("moondream.client.requests.post", return_value=make_response(body)) as mock_post:
        code = main(["--api-key", API_KEY, "query", IMAGE_URL, "What is it?"])

    assert code == 0
    assert capsys.readouterr().out == body + "\n"
    assert mock_post.call_args.args[0] == f"{BASE_URL}/query"


def test_point_uses_env_api_key(monkeypatch, capsys):
    monkeypatch.setenv("MOONDREAM_API_KEY", "env-key")
    with patch("moondream.client.requests.post", return_value=make_response("{}")) as mock_post:
        code = main(["point", IMAGE_URL, "cat"])

    assert code == 0
    assert mock_post.call_args.kwargs["headers"]["Authorization"] == "Bearer env-key"
    assert mock_post.call_args.kwargs["json"] == {"image_url": IMAGE_URL, "object": "cat"}


def test_caption_length_defaults_from_config(monkeypatch):
    monkeypatch.setenv("MOONDREAM_CAPTION_LENGTH", "short")
    with patch("moondream.client.requests.post", return_value=make_response("{}")) as mock_post:
        main(["--api-key", API_KEY, "caption", IMAGE_URL])

    assert mock_post.call_args.kwargs["json"]["length"] == "short"


def test_caption_stream_prints_chunks(capsys):
    response = make_stream_response([b"A beautiful", b" sunset"])
    with patch("moondream.client.requests.post", return_value=response):
        code = main(["--api-key", API_KEY, "caption", IMAGE_URL, "--stream"])

    assert code == 0
    assert capsys.readouterr().out == "A beautiful sunset\n"


def test_missing_api_key_exits_2(capsys):
    with patch("moondream.client.requests.post") as mock_post:
        code = main(["detect", IMAGE_URL, "cat"])

    assert code == 2
    assert "API key" in capsys.readouterr().err
    mock_post.assert_not_called()


def test_transport_error_exits_1(capsys):
    with patch(
        "moondream.client.requests.post",
        side_effect=requests.exceptions.ConnectionError("refused"),
    ):
        code = main(["--api-key", API_KEY, "query", IMAGE_URL, "q"])

    assert code == 1
    assert "refused" in capsys.readouterr().err


def test_no_stream_overrides_env_default(monkeypatch, capsys):
    monkeypatch.setenv("MOONDREAM_CAPTION_STREAM", "1")
    body = '{"caption":"a cat"}'
    with patch("moondream.client.requests.post", return_value=make_response(body)) as mock_post:
        code = main(["--api-key", API_KEY, "caption", IMAGE_URL, "--no-stream"])

    assert code == 0
    assert mock_post.call_args.kwargs["json"]["stream"] is False
    assert capsys.readouterr().out == body + "\n"


def test_invalid_log_level_flag_is_a_usage_error(capsys):
    with patch("moondream.client.requests.post") as mock_post:
        with pytest.raises(SystemExit) as excinfo:
            main(["--api-key", API_KEY, "--log-level", "foo", "query", IMAGE_URL, "q"])

    assert excinfo.value.code == 2
    assert "--log-level" in capsys.readouterr().err
    mock_post.assert_not_called()


def test_log_level_flag_is_case_insensitive():
    with patch("moondream.client.requests.post", return_value=make_response("{}")):
        assert main(["--api-key", API_KEY, "--log-level", "debug", "query", IMAGE_URL, "q"]) == 0


def test_invalid_env_log_level_exits_2(monkeypatch, capsys):
    monkeypatch.setenv("MOONDREAM_LOG_LEVEL", "foo")
    with patch("moondream.client.requests.post") as mock_post:
        code = main(["--api-key", API_KEY, "query", IMAGE_URL, "q"])

    assert code == 2
    assert "invalid log level" in capsys.readouterr().err
    mock_post.assert_not_called()
