import logging
import re
from typing import AsyncIterator, BinaryIO, Optional, Tuple

from fastapi import Request, Response, status
from fastapi.responses import PlainTextResponse, StreamingResponse
from starlette.concurrency import run_in_threadpool

from models import MediaResource

logger = logging.getLogger(__name__)

_digits = re.compile(r"[0-9]+")


class MalformedRangeError(ValueError):
    """Range header that cannot be parsed; the full file is served instead"""


class RangeNotSatisfiableError(Exception):
    def __init__(self, range_header: str, file_size: int):
        super().__init__(f"Range {range_header!r} not satisfiable for {file_size} bytes")
        self.file_size = file_size


def _to_int(value: str, range_header: str) -> int:
    if not _digits.fullmatch(value):
        raise MalformedRangeError(f"Invalid request range (Range:{range_header!r})")
    return int(value)


def parse_range_header(range_header: Optional[str], file_size: int) -> Optional[Tuple[int, int]]:
    """Parse a single byte range into an inclusive (start, end) window.

    Returns None when there is no header. Raises MalformedRangeError for
    anything that is not one ``bytes=`` range and RangeNotSatisfiableError
    when the window starts at or past the end of the file. The end is clamped
    to the last byte.
    """
    if not range_header:
        return None

    unit, sep, ranges = range_header.strip().partition("=")
    if not sep or unit.strip().lower() != "bytes":
        raise MalformedRangeError(f"Missing bytes unit (Range:{range_header!r})")

    parts = ranges.strip().split("-")
    if len(parts) != 2 or "," in ranges:
        raise MalformedRangeError(f"Multiple or invalid ranges (Range:{range_header!r})")

    first, last = parts[0].strip(), parts[1].strip()
    if first == "" and last == "":
        raise MalformedRangeError(f"Empty range (Range:{range_header!r})")

    if first == "":
        # suffix form: the last N bytes
        suffix = _to_int(last, range_header)
        if suffix == 0:
            raise RangeNotSatisfiableError(range_header, file_size)
        start = max(0, file_size - suffix)
        end = file_size - 1
    else:
        start = _to_int(first, range_header)
        if last == "":
            end = file_size - 1
        else:
            end = _to_int(last, range_header)
            if start > end:
                raise MalformedRangeError(f"Range start after end (Range:{range_header!r})")

    if start >= file_size:
        raise RangeNotSatisfiableError(range_header, file_size)

    return start, min(end, file_size - 1)


async def iter_file_range(media_file: BinaryIO, start: int, end: int, chunk_size: int) -> AsyncIterator[bytes]:
    """Yield bytes start..end (inclusive) of media_file, closing it when done.

    Reads run in the threadpool so a slow disk never blocks the event loop.
    The file is closed as soon as the generator finishes, fails, is
    cancelled or is closed by the response after a client disconnect.
    """
    total = end - start + 1
    remaining = total
    try:
        await run_in_threadpool(media_file.seek, start)
        while remaining > 0:
            data = await run_in_threadpool(media_file.read, min(chunk_size, remaining))
            if not data:
                raise OSError(f"Unexpected end of file with {remaining} bytes left")
            remaining -= len(data)
            yield data
    except OSError as e:
        logger.error(f"Stream aborted reading {getattr(media_file, 'name', media_file)}: {e}")
        raise
    finally:
        media_file.close()
        if remaining:
            logger.info(f"Stream closed with {remaining} of {total} bytes unsent")


class FileRangeResponse(StreamingResponse):
    """StreamingResponse over a byte window of an open file.

    The body generator and the file are closed when the response ends,
    including when the client disconnects before the body is finished.
    """

    def __init__(self, media_file: BinaryIO, start: int, end: int, chunk_size: int, **kwargs):
        self.media_file = media_file
        super().__init__(iter_file_range(media_file, start, end, chunk_size), **kwargs)

    async def __call__(self, scope, receive, send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            await self.body_iterator.aclose()
            self.media_file.close()


def range_requests_response(request: Request, resource: MediaResource, chunk_size: int) -> Response:
    """Returns StreamingResponse using Range Requests of the media resource"""

    try:
        media_file, file_size = resource.open()
    except OSError as e:
        logger.warning(f"Video not available at {resource.path}: {e}")
        return PlainTextResponse("Video not found", status_code=status.HTTP_404_NOT_FOUND)

    range_header = request.headers.get("range")

    try:
        window = parse_range_header(range_header, file_size)
    except MalformedRangeError as e:
        logger.warning(f"{e}, serving the full file")
        window = None
    except RangeNotSatisfiableError as e:
        media_file.close()
        logger.info(str(e))
        return Response(
            status_code=416,
            headers={'Content-Range': f'bytes */{e.file_size}'},
        )

    headers = {'Accept-Ranges': 'bytes'}
    if window is None:
        start, end = 0, file_size - 1
        status_code = status.HTTP_200_OK
    else:
        start, end = window
        status_code = status.HTTP_206_PARTIAL_CONTENT
        headers['Content-Range'] = f'bytes {start}-{end}/{file_size}'
    headers['Content-Length'] = str(end - start + 1)

    return FileRangeResponse(
        media_file, start, end, chunk_size,
        status_code=status_code,
        headers=headers,
        media_type=resource.content_type,
    )
