"""Tests for image encoding."""

import os
import stat

import numpy as np
import pytest
from PIL import Image

from ditherio.core.color import MAX_CHANNEL
from ditherio.core.writer import detect_format, save_image


def _checker(size=4):
    arr = np.zeros((size, size, 4), dtype=np.uint16)
    arr[::2, ::2, :3] = MAX_CHANNEL
    arr[1::2, 1::2, :3] = MAX_CHANNEL
    arr[..., 3] = MAX_CHANNEL
    return arr


class TestDetectFormat:
    def test_png(self, tmp_path):
        assert detect_format(tmp_path / "a.PNG") == ("PNG", True)

    def test_jpeg_has_no_alpha(self, tmp_path):
        assert detect_format(tmp_path / "a.jpg") == ("JPEG", False)

    def test_unsupported(self, tmp_path):
        with pytest.raises(ValueError, match="Unsupported"):
            detect_format(tmp_path / "a.txt")


class TestSaveImage:
    def test_png_round_trip(self, tmp_path):
        out = tmp_path / "out.png"
        save_image(_checker(), out)

        img = Image.open(out)
        assert img.format == "PNG"
        assert img.mode == "RGBA"
        assert img.getpixel((0, 0)) == (255, 255, 255, 255)
        assert img.getpixel((1, 0)) == (0, 0, 0, 255)

    def test_jpeg_written_as_rgb(self, tmp_path):
        out = tmp_path / "out.jpg"
        save_image(_checker(), out)
        img = Image.open(out)
        assert img.format == "JPEG"
        assert img.mode == "RGB"

    def test_overwrites_existing(self, tmp_path):
        out = tmp_path / "out.png"
        out.write_bytes(b"old")
        save_image(_checker(), out)
        assert Image.open(out).size == (4, 4)

    def test_unsupported_leaves_nothing(self, tmp_path):
        with pytest.raises(ValueError):
            save_image(_checker(), tmp_path / "out.xyz")
        assert list(tmp_path.iterdir()) == []

    def test_failed_encode_leaves_no_partial_file(self, tmp_path, monkeypatch):
        def boom(self, *args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr(Image.Image, "save", boom)
        with pytest.raises(OSError, match="disk full"):
            save_image(_checker(), tmp_path / "out.png")
        assert list(tmp_path.iterdir()) == []

    def test_missing_directory(self, tmp_path):
        with pytest.raises(OSError):
            save_image(_checker(), tmp_path / "missing" / "out.png")


@pytest.mark.skipif(os.name == "nt", reason="POSIX file modes")
class TestFileMode:
    @pytest.fixture
    def umask_022(self):
        old = os.umask(0o022)
        yield
        os.umask(old)

    def test_new_file_honors_umask(self, tmp_path, umask_022):
        ref = tmp_path / "ref.png"
        ref.write_bytes(b"")
        out = tmp_path / "out.png"
        save_image(_checker(), out)

        assert stat.S_IMODE(out.stat().st_mode) == 0o644
        assert stat.S_IMODE(out.stat().st_mode) == stat.S_IMODE(ref.stat().st_mode)

    def test_overwrite_keeps_existing_mode(self, tmp_path, umask_022):
        out = tmp_path / "out.png"
        out.write_bytes(b"old")
        os.chmod(out, 0o640)
        save_image(_checker(), out)

        assert stat.S_IMODE(out.stat().st_mode) == 0o640
        assert Image.open(out).size == (4, 4)
