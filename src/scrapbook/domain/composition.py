"""Models for composing a memory into a shareable image."""

from dataclasses import dataclass, field

from scrapbook.domain.memories import Memory

RGBA = tuple[int, int, int, int]


@dataclass(frozen=True)
class CompositionLayout:
    """Fixed geometry of the exported square post."""

    canvas_size: int = 1080
    padding: int = 100
    vertical_offset: int = 50
    frame_margin: int = 20
    caption_margin: int = 80
    caption_offset: int = 50
    date_font_size: int = 24
    watermark_font_size: int = 16
    watermark_bottom_offset: int = 30
    watermark_alpha: int = 0x80
    frame_color: str = "#FFFFFF"

    @property
    def max_photo_size(self) -> int:
        return self.canvas_size - 2 * self.padding


@dataclass(frozen=True)
class CompositionRequest:
    """Input for a single export.

    The caption is the post text shared next to the image; only the date and
    the watermark are drawn on the canvas.
    """

    memory: Memory
    template_id: str
    caption: str = ""
    watermark: bool = True


@dataclass(frozen=True)
class DecodedPhoto:
    """Decoded raster with its intrinsic dimensions."""

    width: int
    height: int
    raster: object


@dataclass(frozen=True)
class PhotoPlacement:
    """Scaled size and top-left position of the photo on the canvas."""

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class FillRect:
    """Fill an axis-aligned rectangle."""

    x: float
    y: float
    width: float
    height: float
    color: RGBA


@dataclass(frozen=True)
class DrawPhoto:
    """Draw the decoded photo scaled into a box."""

    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class DrawText:
    """Draw text centred horizontally on a baseline point."""

    text: str
    x: float
    y: float
    font: str
    size: int
    color: RGBA


DrawCommand = FillRect | DrawPhoto | DrawText


@dataclass(frozen=True)
class ComposedImage:
    """Fixed-size canvas described as an ordered list of draw commands."""

    size: int
    photo: DecodedPhoto
    commands: list[DrawCommand] = field(default_factory=list)


@dataclass(frozen=True)
class ExportFile:
    """Encoded image ready to be downloaded."""

    filename: str
    content: bytes
    media_type: str = "image/png"


def fit_size(width: float, height: float, max_size: float) -> tuple[float, float]:
    """Shrink dimensions to fit max_size on the dominant axis, never enlarging."""
    if width > height:
        if width > max_size:
            return max_size, height * max_size / width
    elif height > max_size:
        return width * max_size / height, max_size
    return width, height


def parse_hex_color(value: str, alpha: int = 0xFF) -> RGBA:
    """Parse "#RRGGBB" or "#RGB" into an RGBA tuple."""
    digits = value.strip().lstrip("#")
    if len(digits) == 3:  # noqa: PLR2004
        digits = "".join(char * 2 for char in digits)
    if len(digits) != 6:  # noqa: PLR2004
        raise ValueError(f"Invalid hex colour: {value}")
    red, green, blue = (int(digits[index : index + 2], 16) for index in (0, 2, 4))
    return red, green, blue, alpha
