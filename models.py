import os
from pathlib import Path
from typing import BinaryIO, Tuple

from pydantic import BaseModel, ConfigDict

from config import ServerConfig


class MediaResource(BaseModel):
    """The single pre-rendered video served by the media route"""
    model_config = ConfigDict(frozen=True)

    route: str
    path: Path
    content_type: str = "video/mp4"

    @classmethod
    def from_config(cls, config: ServerConfig) -> "MediaResource":
        return cls(
            route=config.media_route,
            path=config.media_path.absolute(),
            content_type=config.content_type,
        )

    def matches(self, path: str) -> bool:
        """Case-insensitive route match, with or without one trailing slash"""
        if path.startswith("/"):
            path = path[1:]
        if path.endswith("/"):
            path = path[:-1]
        return path.lower() == self.route.lower()

    def open(self) -> Tuple[BinaryIO, int]:
        """Open the file read-only and return it with its current size"""
        media_file = open(self.path, mode="rb")
        try:
            size = os.fstat(media_file.fileno()).st_size
        except OSError:
            media_file.close()
            raise
        return media_file, size
