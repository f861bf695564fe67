"""Image conversion for formats a display layer cannot render natively."""

from __future__ import annotations

import io
import logging
import mimetypes
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from medialens.files import read_file_bytes
from medialens.media.errors import CodecError
from medialens.media.kinds import MediaKind, classify, needs_transcoding

LOGGER = logging.getLogger(__name__)

_TRANSPARENT_MODES = {"RGBA", "LA", "PA"}


class ImageCodec:
    """Re-encode images into baseline JPEG using Pillow."""

    def __init__(self, *, quality: int = 90, background: str = "white") -> None:
        self.quality = quality
        self.background = background

    def normalize_to_displayable(self, data: bytes) -> bytes:
        """Return ``data`` re-encoded as an upright, opaque JPEG.

        EXIF orientation is applied, transparency is flattened onto the
        configured background, and chroma is kept at full resolution.

        Raises:
            CodecError: If the bytes cannot be decoded or re-encoded.
        """
        try:
            with Image.open(io.BytesIO(data)) as source:
                image = ImageOps.exif_transpose(source)
                image = self._flatten(image)
                output = io.BytesIO()
                image.save(output, format="JPEG", quality=self.quality, subsampling=0)
        except (UnidentifiedImageError, Image.DecompressionBombError) as exc:
            raise CodecError(f"Unsupported or corrupt image: {exc}") from exc
        except Exception as exc:  # Pillow raises assorted errors for corrupt input
            raise CodecError(f"Image conversion failed: {exc}") from exc
        return output.getvalue()

    def prepare_preview(self, path: Path) -> tuple[bytes, str]:
        """Return displayable bytes and their MIME type for an image file.

        Only formats that need it are transcoded; others are passed through.

        Raises:
            CodecError: If ``path`` is not an image or conversion fails.
            MediaIOError: If the file cannot be read.
        """
        if classify(path.name) is not MediaKind.IMAGE:
            raise CodecError(f"{path.name} is not an image")
        data = read_file_bytes(path)
        if not needs_transcoding(path.name):
            mime, _ = mimetypes.guess_type(path.name)
            return data, mime or "application/octet-stream"
        LOGGER.debug("Transcoding %s (%d bytes)", path, len(data))
        return self.normalize_to_displayable(data), "image/jpeg"

    def _flatten(self, image: Image.Image) -> Image.Image:
        if image.mode in _TRANSPARENT_MODES or (
            image.mode == "P" and "transparency" in image.info
        ):
            rgba = image.convert("RGBA")
            canvas = Image.new("RGB", rgba.size, self.background)
            canvas.paste(rgba, mask=rgba.getchannel("A"))
            return canvas
        if image.mode != "RGB":
            return image.convert("RGB")
        return image


__all__ = ["ImageCodec"]
