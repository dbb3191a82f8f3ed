"""
Pillow image codec adapter.

Implements the image gate ImageCodecPort. Lossy formats take the
quality directly; palette formats (PNG, GIF) map it to a palette size
and are quantized without dithering so the result stays compressible.
"""

from __future__ import annotations

import io

from PIL import Image, UnidentifiedImageError

from pressroom.core.errors import ImageDecodeError

PIL_FORMATS = {
    "image/jpeg": "JPEG",
    "image/png": "PNG",
    "image/gif": "GIF",
    "image/webp": "WEBP",
}


def palette_colors(quality: float) -> int:
    """Palette size for a quality in (0, 1]; never below 16 colours."""
    return max(16, min(256, round(256 * quality)))


def jpeg_quality(quality: float) -> int:
    """Pillow's 1..95 JPEG/WebP quality scale."""
    return max(1, min(95, round(quality * 100)))


class PillowImageCodec:
    """ImageCodecPort backed by Pillow."""

    def decode(self, data: bytes) -> Image.Image:
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            raise ImageDecodeError(f"Could not decode image: {e}") from e
        return image

    def dimensions(self, image: Image.Image) -> tuple[int, int]:
        return image.size

    def resize(self, image: Image.Image, width: int, height: int) -> Image.Image:
        return image.resize((width, height), Image.Resampling.LANCZOS)

    def encode(self, image: Image.Image, mime_type: str, quality: float) -> bytes:
        fmt = PIL_FORMATS.get(mime_type)
        if fmt is None:
            raise ValueError(f"Cannot encode images as {mime_type}")

        buffer = io.BytesIO()
        if fmt == "JPEG":
            image.convert("RGB").save(
                buffer, format=fmt, quality=jpeg_quality(quality), optimize=True
            )
        elif fmt == "WEBP":
            image.save(buffer, format=fmt, quality=jpeg_quality(quality))
        else:
            self._quantize(image, quality).save(buffer, format=fmt, optimize=True)
        return buffer.getvalue()

    def _quantize(self, image: Image.Image, quality: float) -> Image.Image:
        colors = palette_colors(quality)
        if image.mode in ("RGBA", "LA") or "transparency" in image.info:
            return image.convert("RGBA").quantize(
                colors=colors, method=Image.Quantize.FASTOCTREE, dither=Image.Dither.NONE
            )
        return image.convert("RGB").quantize(colors=colors, dither=Image.Dither.NONE)
