"""Composition engine turning a memory into a shareable square image."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol
from zoneinfo import ZoneInfo

from scrapbook.domain.composition import (
    ComposedImage,
    CompositionLayout,
    CompositionRequest,
    DecodedPhoto,
    DrawCommand,
    DrawPhoto,
    DrawText,
    ExportFile,
    FillRect,
    PhotoPlacement,
    fit_size,
    parse_hex_color,
)
from scrapbook.domain.dates import format_display_date, utc_now
from scrapbook.domain.errors import DecodeError
from scrapbook.domain.memories import Memory
from scrapbook.domain.templates import Template, get_template

logger = logging.getLogger(__name__)

DEFAULT_WATERMARK = "Scrapebook of Memories"
EMPTY_NOTES_PLACEHOLDER = "A moment worth remembering"
CAPTION_HASHTAGS = "#ScrapebookOfMemories #CapturedMoments #MemoryLane"


class ImageDecoder(Protocol):
    """Interface for decoding stored photo payloads."""

    async def decode(self, photo_data: str) -> DecodedPhoto:
        """Decode a photo payload, raising DecodeError when it is corrupt."""


class ImageRenderer(Protocol):
    """Interface for rasterizing and encoding a composed image."""

    def render(self, composed: ComposedImage) -> bytes:
        """Return encoded PNG bytes, raising EncodeError on failure."""


@dataclass
class CompositionService:
    """Lays out, renders and encodes memories with a template."""

    decoder: ImageDecoder
    renderer: ImageRenderer
    layout: CompositionLayout = field(default_factory=CompositionLayout)
    timezone: ZoneInfo = field(default_factory=lambda: ZoneInfo("UTC"))
    watermark_text: str = DEFAULT_WATERMARK
    decode_timeout_seconds: float | None = None
    clock: Callable[[], datetime] = utc_now

    def place_photo(self, width: int, height: int) -> PhotoPlacement:
        """Shrink the photo to fit and centre it above the caption strip."""
        size = self.layout.canvas_size
        scaled_width, scaled_height = fit_size(
            width, height, self.layout.max_photo_size
        )
        return PhotoPlacement(
            x=(size - scaled_width) / 2,
            y=(size - scaled_height) / 2 - self.layout.vertical_offset,
            width=scaled_width,
            height=scaled_height,
        )

    def build_commands(
        self,
        memory: Memory,
        template: Template,
        photo_size: tuple[int, int],
        watermark: bool,
    ) -> list[DrawCommand]:
        """Return the ordered draw commands for one composition."""
        layout = self.layout
        size = layout.canvas_size
        placement = self.place_photo(*photo_size)
        text_color = parse_hex_color(template.text_color)
        margin = layout.frame_margin
        commands: list[DrawCommand] = [
            FillRect(
                x=0,
                y=0,
                width=size,
                height=size,
                color=parse_hex_color(template.background_color),
            ),
            # The frame sits under the photo; only the border and the
            # caption strip below the photo stay visible.
            FillRect(
                x=placement.x - margin,
                y=placement.y - margin,
                width=placement.width + 2 * margin,
                height=placement.height + margin + layout.caption_margin,
                color=parse_hex_color(layout.frame_color),
            ),
            DrawPhoto(
                x=placement.x,
                y=placement.y,
                width=placement.width,
                height=placement.height,
            ),
            DrawText(
                text=format_display_date(memory.captured_at, self.timezone),
                x=size / 2,
                y=placement.y + placement.height + layout.caption_offset,
                font="decorative",
                size=layout.date_font_size,
                color=text_color,
            ),
        ]
        if watermark:
            commands.append(
                DrawText(
                    text=self.watermark_text,
                    x=size / 2,
                    y=size - layout.watermark_bottom_offset,
                    font="plain",
                    size=layout.watermark_font_size,
                    color=(*text_color[:3], layout.watermark_alpha),
                )
            )
        return commands

    async def compose(self, request: CompositionRequest) -> ComposedImage:
        """Decode the memory's photo, then lay out the canvas."""
        template = get_template(request.template_id)
        photo = await self._decode(request.memory)
        commands = self.build_commands(
            request.memory,
            template,
            (photo.width, photo.height),
            request.watermark,
        )
        return ComposedImage(
            size=self.layout.canvas_size, photo=photo, commands=commands
        )

    async def export(self, request: CompositionRequest) -> ExportFile:
        """Compose and encode a memory into a downloadable PNG."""
        composed = await self.compose(request)
        content = await asyncio.to_thread(self.renderer.render, composed)
        filename = f"memory-{int(self.clock().timestamp() * 1000)}.png"
        logger.info(
            "Exported memory %s with template %s as %s",
            request.memory.id,
            request.template_id,
            filename,
        )
        return ExportFile(filename=filename, content=content)

    def generate_caption(self, memory: Memory) -> str:
        """Build a ready-to-post caption for a memory."""
        date_text = format_display_date(memory.captured_at, self.timezone)
        notes = memory.notes or EMPTY_NOTES_PLACEHOLDER
        return f"📸 Memory from {date_text}\n\n{notes}\n\n{CAPTION_HASHTAGS}"

    async def _decode(self, memory: Memory) -> DecodedPhoto:
        try:
            return await asyncio.wait_for(
                self.decoder.decode(memory.photo_data),
                timeout=self.decode_timeout_seconds,
            )
        except TimeoutError as exc:
            logger.warning("Timed out decoding photo for memory %s", memory.id)
            raise DecodeError(f"Timed out decoding memory {memory.id}") from exc
        except DecodeError:
            logger.warning("Failed to decode photo for memory %s", memory.id)
            raise
