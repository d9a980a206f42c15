from pathlib import Path
from configparser import ConfigParser

from pydantic import BaseModel, ConfigDict, Field

# Default configuration
defaults = {
    'host': '0.0.0.0',
    'port': '3000',
    'media_path': 'out/home-row.mp4',
    'media_route': 'HomeRow',
    'content_type': 'video/mp4',
    'chunk_size': str(64 * 1024),
    'probe_media': 'true',
    'log_level': 'INFO',
}

CONFIG_PATH = Path('data/config.ini')


class ServerConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    host: str
    port: int = Field(gt=0, lt=65536)
    media_path: Path
    media_route: str
    content_type: str
    chunk_size: int = Field(gt=0)
    probe_media: bool
    log_level: str


def get_config(path: Path = CONFIG_PATH) -> ConfigParser:
    """Load the configuration, overlaying the config file on the defaults if present"""
    config = ConfigParser()
    config['DEFAULT'] = defaults
    if path.exists():
        config.read(path)
    return config


def load_server_config(path: Path = CONFIG_PATH) -> ServerConfig:
    """Build the validated server config passed to create_app"""
    section = get_config(path)['DEFAULT']
    return ServerConfig(
        host=section.get('host'),
        port=section.get('port'),
        media_path=section.get('media_path'),
        media_route=section.get('media_route').strip('/'),
        content_type=section.get('content_type'),
        chunk_size=section.get('chunk_size'),
        probe_media=section.getboolean('probe_media'),
        log_level=section.get('log_level').upper(),
    )
