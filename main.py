import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import HTMLResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import ServerConfig, load_server_config
from metadata import probe_media
from models import MediaResource
from page import render_page
from range import range_requests_response

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"

logger = logging.getLogger(__name__)


def create_app(config: ServerConfig) -> FastAPI:
    app = FastAPI(title="Home Row Video Server", docs_url=None, redoc_url=None, openapi_url=None)
    resource = MediaResource.from_config(config)

    @app.middleware("http")
    async def log_request(request: Request, call_next):
        logger.info(f"{request.method} {request.url.path}")
        return await call_next(request)

    @app.exception_handler(StarletteHTTPException)
    async def plain_text_error(request: Request, exc: StarletteHTTPException):
        # non-GET on a known path is reported like an unknown path
        if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
            return PlainTextResponse("Not found", status_code=status.HTTP_404_NOT_FOUND)
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code)

    @app.get("/", response_class=HTMLResponse)
    def read_root():
        return render_page(resource)

    @app.get("/{media_path:path}")
    def stream_video(media_path: str, request: Request):
        """Stream the video with HTTP Range support"""
        if not resource.matches(media_path):
            raise HTTPException(status_code=404, detail="Not found")

        return range_requests_response(request, resource, chunk_size=config.chunk_size)

    @app.on_event("startup")
    async def startup_event():
        if not resource.path.exists():
            logger.warning(f"Video not found at {resource.path}, /{resource.route} will return 404")
        elif config.probe_media:
            info = probe_media(resource.path)
            if info:
                logger.info(
                    f"Serving {resource.path}: {info['duration']:.1f}s {info['codec']} "
                    f"{info['width']}x{info['height']}, {info['size']} bytes"
                )

    return app


def run():
    import uvicorn

    config = load_server_config()
    logging.basicConfig(level=config.log_level, format=LOG_FORMAT)
    app = create_app(config)

    logger.info(f"Video server running at http://{config.host}:{config.port}")
    logger.info(f"Video available at http://{config.host}:{config.port}/{config.media_route}")
    uvicorn.run(app, host=config.host, port=config.port, access_log=False)


if __name__ == "__main__":
    run()
