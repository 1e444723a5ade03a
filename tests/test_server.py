"""Tests for the server entry point."""

import os
from unittest.mock import patch

import pytest

from post_uploader import server


@pytest.fixture
def clean_env(monkeypatch):
    for key in ("POSTS_DIR", "API_KEY", "PORT"):
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    return monkeypatch


def test_parser_defaults():
    args = server.build_parser().parse_args([])
    assert args.posts_dir == ""
    assert args.port == ""
    assert args.api_key == ""
    assert args.host == "127.0.0.1"
    assert args.reload is False
    assert args.log_level == "info"


def test_flags_override_environment(clean_env, tmp_path):
    """Test that command-line flags replace environment values."""
    clean_env.setenv("API_KEY", "from-env")
    args = server.build_parser().parse_args(["--posts-dir", str(tmp_path), "--api-key", "from-flag", "--port", "9001"])

    server.apply_flags(args)

    assert os.environ["POSTS_DIR"] == str(tmp_path)
    assert os.environ["API_KEY"] == "from-flag"
    assert os.environ["PORT"] == "9001"


def test_empty_flags_keep_environment(clean_env):
    clean_env.setenv("API_KEY", "from-env")
    server.apply_flags(server.build_parser().parse_args([]))

    assert os.environ["API_KEY"] == "from-env"


def test_main_runs_uvicorn(clean_env, tmp_path):
    """Test that main creates the posts directory and starts uvicorn."""
    posts_dir = tmp_path / "_posts"
    with patch.object(server, "load_env", return_value=False), patch.object(server.uvicorn, "run") as run:
        server.main(["--posts-dir", str(posts_dir), "--port", "9002"])

    assert posts_dir.is_dir()
    run.assert_called_once()
    assert run.call_args.args == ("post_uploader.api.app:create_app",)
    assert run.call_args.kwargs["port"] == 9002
    assert run.call_args.kwargs["factory"] is True
