# Shared fixtures: a small serving root and a client factory.

import pytest
from fastapi.testclient import TestClient

from video_page.config import ServerConfig
from video_page.main import create_app

# Starlette's TestClient reports this as the caller host
TEST_CALLER = "testclient"


@pytest.fixture
def serving_root(tmp_path):
    root = tmp_path / "videos"
    root.mkdir()
    (root / "file1.txt").write_text("Hello, file 1!")
    (root / ".hidden").write_text("secret")
    (root / "._file1.txt").write_text("metadata")
    sub = root / "sub"
    sub.mkdir()
    (sub / "inner.txt").write_text("inner")
    return root


@pytest.fixture
def make_client(serving_root):
    def _make(policy=None, **overrides):
        options = {"serving_root": serving_root, "allowed_caller": TEST_CALLER}
        options.update(overrides)
        return TestClient(create_app(ServerConfig(**options), policy=policy))

    return _make


@pytest.fixture
def client(make_client):
    return make_client()
