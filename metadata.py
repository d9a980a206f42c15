import os
import logging
from pathlib import Path
from typing import Optional

import ffmpeg

logger = logging.getLogger(__name__)


def probe_media(path: Path) -> Optional[dict]:
    """Extract duration, codec and dimensions of the rendered video"""
    if not os.path.exists(path):
        logger.warning(f"File not found: {path}")
        return None

    try:
        probe = ffmpeg.probe(str(path))
    except ffmpeg.Error as e:
        stderr = e.stderr.decode(errors="replace") if e.stderr else e
        logger.warning(f"Failed to probe {path}: {stderr}")
        return None
    except FileNotFoundError:
        logger.warning("ffprobe not found, skipping media probe")
        return None

    video_stream = next(
        (stream for stream in probe['streams'] if stream['codec_type'] == 'video'),
        None
    )
    if not video_stream:
        logger.warning(f"No video stream in {path}")
        return None

    return {
        'duration': float(probe['format'].get('duration', 0)),
        'codec': video_stream['codec_name'],
        'width': int(video_stream['width']),
        'height': int(video_stream['height']),
        'size': os.path.getsize(path),
    }
