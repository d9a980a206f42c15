import pytest
from fastapi.testclient import TestClient

from config import ServerConfig
from main import create_app

MEDIA_BYTES = bytes(i % 251 for i in range(1000))


@pytest.fixture
def media_file(tmp_path):
    path = tmp_path / "home-row.mp4"
    path.write_bytes(MEDIA_BYTES)
    return path


@pytest.fixture
def server_config(media_file):
    return ServerConfig(
        host="127.0.0.1",
        port=3000,
        media_path=media_file,
        media_route="HomeRow",
        content_type="video/mp4",
        chunk_size=64,
        probe_media=False,
        log_level="INFO",
    )


@pytest.fixture
def client(server_config):
    return TestClient(create_app(server_config))


@pytest.fixture
def anyio_backend():
    return "asyncio"
