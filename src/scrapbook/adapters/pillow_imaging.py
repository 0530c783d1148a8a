"""Pillow-backed photo decoding and canvas rendering."""

import asyncio
import base64
import binascii
import io
import logging
from dataclasses import dataclass, field

from PIL import Image, ImageDraw, ImageFont, ImageOps, UnidentifiedImageError

from scrapbook.domain.composition import (
    ComposedImage,
    DecodedPhoto,
    DrawCommand,
    DrawPhoto,
    FillRect,
)
from scrapbook.domain.errors import DecodeError, EncodeError
from scrapbook.services.composition import ImageDecoder, ImageRenderer

logger = logging.getLogger(__name__)

FontType = ImageFont.FreeTypeFont | ImageFont.ImageFont


def payload_to_bytes(photo_data: str | bytes) -> bytes:
    """Extract raw image bytes from a data URL, bare base64 or raw bytes."""
    if isinstance(photo_data, bytes):
        return photo_data
    payload = photo_data.strip()
    if payload.startswith("data:"):
        header, _, payload = payload.partition(",")
        if ";base64" not in header:
            raise DecodeError("Only base64 data URLs are supported")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise DecodeError("Photo payload is not valid base64") from exc


def _open_image(image_bytes: bytes) -> Image.Image:
    try:
        with Image.open(io.BytesIO(image_bytes)) as image:
            image.load()
            oriented = ImageOps.exif_transpose(image)
            return oriented.convert("RGBA")
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        ValueError,
    ) as exc:
        raise DecodeError("Photo payload could not be decoded") from exc


@dataclass
class PillowImageDecoder(ImageDecoder):
    """Decode photo payloads with Pillow off the event loop."""

    async def decode(self, photo_data: str) -> DecodedPhoto:
        """Decode a photo payload into an RGBA raster."""
        image_bytes = payload_to_bytes(photo_data)
        image = await asyncio.to_thread(_open_image, image_bytes)
        return DecodedPhoto(width=image.width, height=image.height, raster=image)


@dataclass
class PillowImageRenderer(ImageRenderer):
    """Replay draw commands onto a Pillow canvas and encode it as PNG."""

    font_paths: dict[str, str | None] = field(default_factory=dict)
    _fonts: dict[tuple[str, int], FontType] = field(
        default_factory=dict, init=False, repr=False
    )

    def render(self, composed: ComposedImage) -> bytes:
        """Rasterize a composed image and return PNG bytes."""
        try:
            canvas = Image.new("RGBA", (composed.size, composed.size))
            for command in composed.commands:
                canvas = self._apply(canvas, command, composed.photo)
            buffer = io.BytesIO()
            canvas.convert("RGB").save(buffer, format="PNG")
        except (OSError, ValueError, TypeError) as exc:
            logger.exception("Failed to render composed image")
            raise EncodeError("Composed image could not be encoded") from exc
        return buffer.getvalue()

    def _apply(
        self,
        canvas: Image.Image,
        command: DrawCommand,
        photo: DecodedPhoto,
    ) -> Image.Image:
        if isinstance(command, FillRect):
            box = _box(command.x, command.y, command.width, command.height)
            ImageDraw.Draw(canvas).rectangle(box, fill=command.color)
            return canvas
        if isinstance(command, DrawPhoto):
            raster = photo.raster
            if not isinstance(raster, Image.Image):
                raise TypeError("Decoded photo is not a Pillow image")
            left, top, right, bottom = _box(
                command.x, command.y, command.width, command.height
            )
            size = (max(1, right - left + 1), max(1, bottom - top + 1))
            if raster.size != size:
                raster = raster.resize(size, Image.Resampling.LANCZOS)
            canvas.alpha_composite(raster, dest=(left, top))
            return canvas
        font = self._font(command.font, command.size)
        position = (round(command.x), round(command.y))
        if command.color[3] == 0xFF:  # noqa: PLR2004
            ImageDraw.Draw(canvas).text(
                position, command.text, fill=command.color, font=font, anchor="ms"
            )
            return canvas
        overlay = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        ImageDraw.Draw(overlay).text(
            position, command.text, fill=command.color, font=font, anchor="ms"
        )
        return Image.alpha_composite(canvas, overlay)

    def _font(self, role: str, size: int) -> FontType:
        key = (role, size)
        if key not in self._fonts:
            path = self.font_paths.get(role)
            if path:
                self._fonts[key] = ImageFont.truetype(path, size)
            else:
                self._fonts[key] = ImageFont.load_default(size=size)
        return self._fonts[key]


def _box(x: float, y: float, width: float, height: float) -> tuple[int, int, int, int]:
    """Round a float rectangle to inclusive integer pixel bounds."""
    left = round(x)
    top = round(y)
    right = round(x + width) - 1
    bottom = round(y + height) - 1
    return left, top, right, bottom
