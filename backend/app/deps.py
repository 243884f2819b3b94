"""FastAPI dependencies shared by the routers."""

from typing import Annotated

from fastapi import Depends, Request

from app.config import get_settings
from app.services.lgtm_service import LgtmService
from app.services.storage import OutputStore


def get_lgtm_service(request: Request) -> LgtmService:
    """Return the service built once in the application lifespan."""
    return request.app.state.lgtm_service


def get_output_store() -> OutputStore:
    return OutputStore(get_settings().output_dir)


Service = Annotated[LgtmService, Depends(get_lgtm_service)]
Store = Annotated[OutputStore, Depends(get_output_store)]
