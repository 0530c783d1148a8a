"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse

from scrapbook.api.models import (
    CaptionResponse,
    CreateMemoryRequest,
    DayGroupResponse,
    ExportRequest,
    MemoryResponse,
    UpdateNotesRequest,
)
from scrapbook.app_logging import configure_logging
from scrapbook.containers import AppContainer
from scrapbook.domain.composition import CompositionRequest
from scrapbook.domain.dates import format_display_date, format_selection_label
from scrapbook.domain.errors import (
    DecodeError,
    EncodeError,
    NotFoundError,
    ScrapbookError,
    StorageUnavailableError,
)
from scrapbook.domain.memories import Memory
from scrapbook.domain.templates import CAPTURE_FILTERS, TEMPLATES

_ERROR_STATUS: dict[type[ScrapbookError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    StorageUnavailableError: status.HTTP_503_SERVICE_UNAVAILABLE,
    DecodeError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    EncodeError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(ScrapbookError)
    async def scrapbook_error(request: Request, exc: ScrapbookError) -> JSONResponse:
        """Translate domain failures into JSON errors."""
        status_code = _status_for(exc)
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=status_code, content={"detail": str(exc)})

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/templates")
    async def list_templates() -> dict[str, object]:
        """Return the export template catalog."""
        return {"templates": [asdict(template) for template in TEMPLATES]}

    @app.get("/filters")
    async def list_filters() -> dict[str, object]:
        """Return the capture filter catalog."""
        return {"filters": [asdict(capture) for capture in CAPTURE_FILTERS]}

    @app.get("/memories")
    async def list_memories(
        request: Request, q: str | None = None
    ) -> dict[str, list[MemoryResponse]]:
        """Return memories, optionally filtered by a search query."""
        state_container: AppContainer = request.app.state.container
        memories = state_container.memory_service.search(q)
        return {"memories": [_to_response(state_container, m) for m in memories]}

    @app.get("/memories/count")
    async def count_memories(request: Request) -> dict[str, int]:
        """Return the number of saved memories."""
        state_container: AppContainer = request.app.state.container
        return {"count": state_container.memory_service.count()}

    @app.get("/memories/grouped")
    async def grouped_memories(
        request: Request, q: str | None = None
    ) -> dict[str, list[DayGroupResponse]]:
        """Return memories grouped by day, most recent day first."""
        state_container: AppContainer = request.app.state.container
        groups = state_container.memory_service.browse(q)
        return {
            "days": [
                DayGroupResponse(
                    day=group.day_key,
                    heading=group.heading,
                    memories=[
                        _to_response(state_container, m) for m in group.memories
                    ],
                )
                for group in groups
            ]
        }

    @app.post("/memories", status_code=status.HTTP_201_CREATED)
    async def create_memory(
        payload: CreateMemoryRequest, request: Request
    ) -> MemoryResponse:
        """Save a captured photo as a new memory."""
        state_container: AppContainer = request.app.state.container
        memory = state_container.memory_service.create(
            photo_data=payload.photo,
            filter_id=payload.filter_id,
            notes=payload.notes,
        )
        return _to_response(state_container, memory)

    @app.get("/memories/{memory_id}")
    async def get_memory(memory_id: str, request: Request) -> MemoryResponse:
        """Return a single memory."""
        state_container: AppContainer = request.app.state.container
        memory = state_container.memory_service.get(memory_id)
        return _to_response(state_container, memory)

    @app.patch("/memories/{memory_id}")
    async def update_memory(
        memory_id: str, payload: UpdateNotesRequest, request: Request
    ) -> MemoryResponse:
        """Replace a memory's notes."""
        state_container: AppContainer = request.app.state.container
        memory = state_container.memory_service.update(memory_id, payload.notes)
        return _to_response(state_container, memory)

    @app.delete("/memories/{memory_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_memory(memory_id: str, request: Request) -> Response:
        """Delete a memory; unknown ids succeed as well."""
        state_container: AppContainer = request.app.state.container
        state_container.memory_service.delete(memory_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.post("/memories/{memory_id}/caption")
    async def generate_caption(memory_id: str, request: Request) -> CaptionResponse:
        """Generate a shareable caption for a memory."""
        state_container: AppContainer = request.app.state.container
        memory = state_container.memory_service.get(memory_id)
        caption = state_container.composition_service.generate_caption(memory)
        return CaptionResponse(caption=caption)

    @app.post("/memories/{memory_id}/export")
    async def export_memory(
        memory_id: str, payload: ExportRequest, request: Request
    ) -> Response:
        """Render a memory with a template and return the PNG download."""
        state_container: AppContainer = request.app.state.container
        memory = state_container.memory_service.get(memory_id)
        export = await state_container.composition_service.export(
            CompositionRequest(
                memory=memory,
                template_id=payload.template_id,
                caption=payload.caption,
                watermark=payload.watermark,
            )
        )
        return Response(
            content=export.content,
            media_type=export.media_type,
            headers={
                "Content-Disposition": f'attachment; filename="{export.filename}"'
            },
        )

    return app


def _status_for(exc: ScrapbookError) -> int:
    for error_type, status_code in _ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _to_response(container: AppContainer, memory: Memory) -> MemoryResponse:
    timezone = container.memory_service.timezone
    return MemoryResponse(
        id=memory.id,
        photo=memory.photo_data,
        captured_at=memory.captured_at,
        filter_id=memory.filter_id,
        notes=memory.notes,
        display_date=format_display_date(memory.captured_at, timezone),
        label=format_selection_label(memory.captured_at, timezone),
    )
