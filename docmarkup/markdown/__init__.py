from .backends import Backend, BackendRegistry, MarkupRenderError
from .document import Document, Section
from .references import (
    LookupContext,
    Reference,
    ReferenceNotFound,
    ReferenceResolver,
    lookup_from_modules,
)
from .renderer import MarkupProcessor, create_processor

__all__ = [
    "Backend",
    "BackendRegistry",
    "Document",
    "LookupContext",
    "MarkupProcessor",
    "MarkupRenderError",
    "Reference",
    "ReferenceNotFound",
    "ReferenceResolver",
    "Section",
    "create_processor",
    "lookup_from_modules",
]
