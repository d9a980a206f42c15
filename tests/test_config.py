from pathlib import Path

import pytest
from pydantic import ValidationError

from config import load_server_config
from models import MediaResource


def test_defaults_without_config_file(tmp_path):
    config = load_server_config(tmp_path / "missing.ini")

    assert config.port == 3000
    assert config.media_path == Path("out/home-row.mp4")
    assert config.media_route == "HomeRow"
    assert config.content_type == "video/mp4"
    assert config.chunk_size == 64 * 1024
    assert config.probe_media is True
    assert not (tmp_path / "missing.ini").exists()


def test_config_file_overrides_defaults(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text(
        "[DEFAULT]\n"
        "port = 8088\n"
        "media_path = /srv/media/intro.mp4\n"
        "media_route = /Intro/\n"
        "chunk_size = 1024\n"
        "probe_media = no\n"
        "log_level = debug\n"
    )
    config = load_server_config(path)

    assert config.port == 8088
    assert config.media_path == Path("/srv/media/intro.mp4")
    assert config.media_route == "Intro"
    assert config.chunk_size == 1024
    assert config.probe_media is False
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize("line", ["chunk_size = 0", "port = http", "port = 70000"])
def test_invalid_values_are_rejected(tmp_path, line):
    path = tmp_path / "config.ini"
    path.write_text(f"[DEFAULT]\n{line}\n")

    with pytest.raises(ValidationError):
        load_server_config(path)


def test_media_resource_from_config(server_config, media_file):
    resource = MediaResource.from_config(server_config)

    assert resource.route == "HomeRow"
    assert resource.path == media_file.absolute()
    assert resource.matches("/homerow/")
    assert resource.matches("HomeRow")
    assert not resource.matches("/HomeRow.mp4")

    media, size = resource.open()
    with media:
        assert size == 1000
        assert media.read(3) == bytes([0, 1, 2])
