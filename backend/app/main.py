"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import get_settings
from app.routers import lgtm
from app.services.codecs import get_codec
from app.services.compositor import Compositor
from app.services.errors import LgtmError
from app.services.fetcher import ImageFetcher
from app.services.fonts import load_font
from app.services.lgtm_service import LgtmService

logger = logging.getLogger("lgtm")

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown.

    The font is loaded here, once; a FontLoadError aborts startup.
    """
    settings = get_settings()
    settings.ensure_storage_dirs()
    font = load_font(settings.font_path)
    compositor = Compositor(font, get_codec(settings.codec_backend))
    fetcher = ImageFetcher(timeout=settings.fetch_timeout, max_bytes=settings.fetch_max_bytes)
    app.state.lgtm_service = LgtmService(compositor, fetcher)
    logger.info("Started %s (font=%s, codec=%s)", settings.app_name, font.name, compositor.codec.name)
    yield
    logger.info("Shutting down %s", settings.app_name)


app = FastAPI(
    title="LGTM Image API",
    version=VERSION,
    lifespan=lifespan,
)

# CORS
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins if not settings.debug else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(LgtmError)
async def lgtm_error_handler(request: Request, exc: LgtmError) -> JSONResponse:
    logger.warning("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": str(exc)},
    )


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


app.include_router(lgtm.router)


@app.get("/health")
async def health_check() -> dict:
    return {"status": "healthy", "version": VERSION}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=3300, reload=True)
