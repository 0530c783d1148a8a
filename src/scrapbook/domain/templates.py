"""Static catalogs of export templates and capture filters."""

from dataclasses import dataclass

from scrapbook.domain.errors import TemplateNotFoundError


@dataclass(frozen=True)
class Template:
    """Named colour scheme applied when exporting a memory."""

    id: str
    name: str
    background_color: str
    text_color: str


@dataclass(frozen=True)
class CaptureFilter:
    """Filter baked into a photo at capture time."""

    id: str
    name: str
    style: str


TEMPLATES: tuple[Template, ...] = (
    Template(
        id="minimal", name="Minimal", background_color="#FFFFFF", text_color="#000000"
    ),
    Template(
        id="vintage", name="Vintage", background_color="#F4E8D0", text_color="#5C4033"
    ),
    Template(
        id="modern", name="Modern", background_color="#1A1A1A", text_color="#FFFFFF"
    ),
    Template(
        id="pastel", name="Pastel", background_color="#FFE8E8", text_color="#6B5B95"
    ),
    Template(
        id="nature", name="Nature", background_color="#E8F5E9", text_color="#2E7D32"
    ),
)

DEFAULT_TEMPLATE_ID = "minimal"

CAPTURE_FILTERS: tuple[CaptureFilter, ...] = (
    CaptureFilter(id="none", name="Original", style=""),
    CaptureFilter(
        id="vintage",
        name="Vintage",
        style="sepia(0.5) contrast(1.2) brightness(0.9)",
    ),
    CaptureFilter(id="bw", name="B&W", style="grayscale(1) contrast(1.1)"),
    CaptureFilter(
        id="warm",
        name="Warm",
        style="sepia(0.2) saturate(1.5) hue-rotate(-10deg)",
    ),
    CaptureFilter(
        id="cool",
        name="Cool",
        style="saturate(1.2) hue-rotate(20deg) brightness(1.1)",
    ),
    CaptureFilter(
        id="dreamy",
        name="Dreamy",
        style="contrast(0.9) brightness(1.1) blur(0.5px)",
    ),
)


def get_template(template_id: str) -> Template:
    """Return a template from the catalog by id."""
    for template in TEMPLATES:
        if template.id == template_id:
            return template
    raise TemplateNotFoundError(template_id)
