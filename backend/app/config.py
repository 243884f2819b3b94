"""Application settings from environment variables."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration."""

    app_name: str = "LgtmImage"
    debug: bool = True

    # Storage paths
    storage_dir: Path = Path("storage")
    output_dir: Path = Path("storage/output")

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Rendering
    font_path: Path | None = None  # None → typeface bundled with Pillow
    codec_backend: str = "pillow"  # "pillow" | "opencv"

    # Request defaults
    default_text: str = "LGTM"
    default_text_color: str = "#FFFFFFFF"
    default_text_position: str = "center"
    default_output_format: str = "png"

    # Remote image fetch
    fetch_timeout: float = 30.0  # seconds
    fetch_max_bytes: int = 20 * 1024 * 1024

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    def ensure_storage_dirs(self) -> None:
        """Create storage directories if they don't exist."""
        self.output_dir.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_settings() -> Settings:
    return Settings()
