from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from keydrop.config import Settings
from keydrop.main import create_app


@pytest.fixture()
def upload_root(tmp_path) -> Path:
    root = tmp_path / "uploads"
    root.mkdir()
    return root


@pytest.fixture()
def make_settings(upload_root):
    def _make(**overrides) -> Settings:
        values = {
            "allowed_upload_dir": str(upload_root),
            "keys": {"TEST": str(upload_root / "target.txt")},
            "enable_rate_limiter": False,
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture()
def make_client(make_settings):
    def _make(**overrides) -> TestClient:
        return TestClient(create_app(make_settings(**overrides)))

    return _make


@pytest.fixture()
def client(make_client) -> TestClient:
    return make_client()
