"""Tests for file access helpers and the image codec."""

import io
import os
from pathlib import Path

import pytest
from PIL import Image

from medialens.codec import ImageCodec
from medialens.files import read_file_bytes, read_file_text, write_file_text
from medialens.media import CodecError, MediaIOError


def test_read_helpers_return_contents(tmp_path: Path) -> None:
    target = tmp_path / "notes.txt"
    target.write_text("héllo\nworld", encoding="utf-8")

    assert read_file_text(target) == "héllo\nworld"
    assert read_file_bytes(target) == "héllo\nworld".encode("utf-8")


def test_read_missing_file_reports_not_found(tmp_path: Path) -> None:
    with pytest.raises(MediaIOError) as excinfo:
        read_file_text(tmp_path / "missing.txt")

    assert excinfo.value.reason == "not_found"


def test_read_invalid_encoding_raises_io_error(tmp_path: Path) -> None:
    target = tmp_path / "binary.txt"
    target.write_bytes(b"\xff\xfe\xfa")

    with pytest.raises(MediaIOError) as excinfo:
        read_file_text(target)

    assert excinfo.value.reason == "other"


def test_write_replaces_contents_without_leftovers(tmp_path: Path) -> None:
    target = tmp_path / "notes.txt"
    target.write_text("old", encoding="utf-8")

    write_file_text(target, "new transcript")

    assert target.read_text(encoding="utf-8") == "new transcript"
    assert sorted(os.listdir(tmp_path)) == ["notes.txt"]


def test_crlf_line_endings_survive_read_and_save(tmp_path: Path) -> None:
    target = tmp_path / "notes.txt"
    target.write_bytes(b"line one\r\nline two\r\n")

    text = read_file_text(target)
    write_file_text(target, text)

    assert text == "line one\r\nline two\r\n"
    assert target.read_bytes() == b"line one\r\nline two\r\n"


def test_write_into_missing_directory_fails(tmp_path: Path) -> None:
    with pytest.raises(MediaIOError) as excinfo:
        write_file_text(tmp_path / "missing" / "notes.txt", "text")

    assert excinfo.value.reason == "not_found"


def _encode(image: Image.Image, fmt: str) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


def test_normalize_transparent_png_to_opaque_jpeg() -> None:
    source = Image.new("RGBA", (8, 4), (255, 0, 0, 0))

    output = ImageCodec().normalize_to_displayable(_encode(source, "PNG"))

    with Image.open(io.BytesIO(output)) as result:
        assert result.format == "JPEG"
        assert result.mode == "RGB"
        assert result.size == (8, 4)
        red, green, blue = result.getpixel((0, 0))
        assert min(red, green, blue) > 240


def test_normalize_rejects_garbage() -> None:
    with pytest.raises(CodecError):
        ImageCodec().normalize_to_displayable(b"definitely not an image")


def test_prepare_preview_transcodes_tiff_only(tmp_path: Path) -> None:
    tiff_path = tmp_path / "scan.tif"
    Image.new("RGB", (16, 16), "blue").save(tiff_path, format="TIFF")
    png_path = tmp_path / "photo.png"
    Image.new("RGB", (4, 4), "green").save(png_path, format="PNG")

    codec = ImageCodec(quality=80)
    tiff_bytes, tiff_mime = codec.prepare_preview(tiff_path)
    png_bytes, png_mime = codec.prepare_preview(png_path)

    assert tiff_mime == "image/jpeg"
    assert tiff_bytes[:2] == b"\xff\xd8"
    assert png_mime == "image/png"
    assert png_bytes == png_path.read_bytes()


def test_prepare_preview_of_corrupt_tiff_raises_codec_error(tmp_path: Path) -> None:
    broken = tmp_path / "broken.tiff"
    broken.write_bytes(b"II*\x00garbage")

    with pytest.raises(CodecError):
        ImageCodec().prepare_preview(broken)


def test_prepare_preview_rejects_non_images(tmp_path: Path) -> None:
    clip = tmp_path / "clip.mp4"
    clip.write_bytes(b"")

    with pytest.raises(CodecError):
        ImageCodec().prepare_preview(clip)
