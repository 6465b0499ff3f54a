# Tests for the app factory and process startup.

from unittest.mock import MagicMock, patch

from fastapi.testclient import TestClient

from video_page import main
from video_page.config import ServerConfig


def test_build_app_reads_env(monkeypatch, serving_root):
    monkeypatch.setenv("VIDEO_PAGE_ROOT", str(serving_root))
    monkeypatch.setenv("VIDEO_PAGE_ALLOWED_IP", "testclient")
    client = TestClient(main.build_app())
    assert client.get("/").status_code == 200


def test_run_starts_uvicorn(serving_root):
    config = ServerConfig(serving_root=serving_root, host="127.0.0.1", port=8123)
    server = MagicMock()
    with patch.object(main, "log_local_ips", return_value=[]) as mock_ips, \
            patch.object(main.uvicorn, "Server", return_value=server) as mock_server:
        main.run(config)

    mock_ips.assert_called_once()
    uv_config = mock_server.call_args.args[0]
    assert uv_config.host == "127.0.0.1"
    assert uv_config.port == 8123
    server.run.assert_called_once()
