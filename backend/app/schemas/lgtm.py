"""Pydantic schemas for the LGTM image endpoints."""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FetchImageRequest(BaseModel):
    """Request body for captioning a remote (or data URL) image.

    Field names follow the frontend's camelCase; snake_case is accepted too.
    Unset optional fields fall back to the configured defaults.
    """
    url: str = Field(min_length=1)
    text: str | None = None
    text_color: str | None = Field(default=None, alias="textColor")
    text_position: str | None = Field(default=None, alias="textPosition")
    output_format: str | None = Field(default=None, alias="outputFormat")
    custom_x: int | None = Field(default=None, alias="customX", ge=0)
    custom_y: int | None = Field(default=None, alias="customY", ge=0)

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="after")
    def _custom_offset_pair(self) -> "FetchImageRequest":
        if (self.custom_x is None) != (self.custom_y is None):
            raise ValueError("customX and customY must be given together")
        return self

    @property
    def custom_offset(self) -> tuple[int, int] | None:
        if self.custom_x is None or self.custom_y is None:
            return None
        return (self.custom_x, self.custom_y)


class UploadResponse(BaseModel):
    status: str = "ok"
    content_type: str
    size: int
