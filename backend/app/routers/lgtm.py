"""LGTM image API routes (upload, preview, download, fetch)."""

import logging
from typing import Annotated

from fastapi import APIRouter, Form, UploadFile
from fastapi.responses import Response

from app.config import get_settings
from app.deps import Service, Store
from app.schemas.lgtm import FetchImageRequest, UploadResponse

logger = logging.getLogger("lgtm.routers")

router = APIRouter(tags=["lgtm"])


@router.post("/upload", response_model=UploadResponse)
async def upload_image(
    file: UploadFile,
    service: Service,
    store: Store,
    text: Annotated[str | None, Form()] = None,
    text_color: Annotated[str | None, Form(alias="textColor")] = None,
    text_position: Annotated[str | None, Form(alias="textPosition")] = None,
    output_format: Annotated[str | None, Form(alias="outputFormat")] = None,
) -> UploadResponse:
    """Caption an uploaded image and cache it for /preview and /download."""
    settings = get_settings()
    content = await file.read()

    rendered = await service.generate_lgtm_image(
        content,
        text if text is not None else settings.default_text,
        text_color or settings.default_text_color,
        text_position or settings.default_text_position,
        output_format or settings.default_output_format,
    )
    store.save(rendered.data, rendered.output_format)

    return UploadResponse(content_type=rendered.content_type, size=len(rendered.data))


@router.get("/preview")
async def preview_image(store: Store) -> Response:
    """Serve the last generated image inline."""
    data, fmt = store.load()
    return Response(content=data, media_type=fmt.content_type)


@router.get("/download")
async def download_image(store: Store) -> Response:
    """Serve the last generated image as an attachment."""
    data, fmt = store.load()
    return Response(
        content=data,
        media_type=fmt.content_type,
        headers={
            "Content-Disposition": f'attachment; filename="downloaded_image.{fmt.extension}"',
        },
    )


@router.post("/fetch")
async def fetch_image(body: FetchImageRequest, service: Service) -> Response:
    """Fetch an image by URL, caption it and return the encoded result."""
    settings = get_settings()
    rendered = await service.generate_lgtm_image_from_url(
        body.url,
        body.text if body.text is not None else settings.default_text,
        body.text_color or settings.default_text_color,
        body.text_position or settings.default_text_position,
        body.output_format or settings.default_output_format,
        custom_offset=body.custom_offset,
    )
    return Response(content=rendered.data, media_type=rendered.content_type)
