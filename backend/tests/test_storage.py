"""Unit tests for the output image cache."""

from pathlib import Path

import pytest

from app.services.codecs import OutputFormat
from app.services.errors import OutputNotFoundError
from app.services.storage import OutputStore


class TestOutputStore:
    def test_load_empty_raises(self, tmp_path: Path) -> None:
        with pytest.raises(OutputNotFoundError):
            OutputStore(tmp_path / "missing").load()

    def test_save_and_load(self, tmp_path: Path) -> None:
        store = OutputStore(tmp_path)
        path = store.save(b"png-bytes", OutputFormat.PNG)
        assert path == tmp_path / "output.png"
        assert store.load() == (b"png-bytes", OutputFormat.PNG)

    def test_save_replaces_other_format(self, tmp_path: Path) -> None:
        store = OutputStore(tmp_path)
        store.save(b"png-bytes", OutputFormat.PNG)
        store.save(b"jpeg-bytes", OutputFormat.JPEG)
        assert not (tmp_path / "output.png").exists()
        assert store.load() == (b"jpeg-bytes", OutputFormat.JPEG)

    def test_no_temp_file_left_behind(self, tmp_path: Path) -> None:
        OutputStore(tmp_path).save(b"x", OutputFormat.PNG)
        assert sorted(p.name for p in tmp_path.iterdir()) == ["output.png"]
