"""Domain errors surfaced by the scrapbook services."""


class ScrapbookError(Exception):
    """Base class for scrapbook failures reported to callers."""


class NotFoundError(ScrapbookError):
    """Raised when a referenced entity does not exist."""


class MemoryNotFoundError(NotFoundError):
    """Raised when a memory id is not present in the store."""

    def __init__(self, memory_id: str) -> None:
        super().__init__(f"Memory not found: {memory_id}")
        self.memory_id = memory_id


class TemplateNotFoundError(NotFoundError):
    """Raised when a template id is not in the catalog."""

    def __init__(self, template_id: str) -> None:
        super().__init__(f"Template not found: {template_id}")
        self.template_id = template_id


class StorageUnavailableError(ScrapbookError):
    """Raised when the persistence medium cannot be read or written."""


class DecodeError(ScrapbookError):
    """Raised when a stored photo payload cannot be decoded."""


class EncodeError(ScrapbookError):
    """Raised when a composed image cannot be rendered or encoded."""
