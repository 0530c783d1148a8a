"""Pydantic models for the memories HTTP API."""

from datetime import datetime

from pydantic import BaseModel, Field

from scrapbook.domain.templates import DEFAULT_TEMPLATE_ID


class CreateMemoryRequest(BaseModel):
    """Payload for saving a captured photo."""

    photo: str = Field(min_length=1)
    filter_id: str = "none"
    notes: str = ""


class UpdateNotesRequest(BaseModel):
    """Payload for editing a memory's notes."""

    notes: str


class ExportRequest(BaseModel):
    """Options for exporting a memory as an image.

    ``caption`` is post text for the share; it is not rendered into the PNG.
    """

    template_id: str = DEFAULT_TEMPLATE_ID
    caption: str = ""
    watermark: bool = True


class MemoryResponse(BaseModel):
    """Serialized memory."""

    id: str
    photo: str
    captured_at: datetime
    filter_id: str
    notes: str
    display_date: str
    label: str


class DayGroupResponse(BaseModel):
    """Memories captured on one day."""

    day: str
    heading: str
    memories: list[MemoryResponse]


class CaptionResponse(BaseModel):
    """Generated caption text."""

    caption: str
