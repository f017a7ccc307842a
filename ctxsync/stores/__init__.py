"""Persistence helpers for generated registries."""

from .registry_store import (
    ANNOTATION_MARKER,
    load_previous,
    render_registry,
    strip_header,
    write_registry,
)

__all__ = [
    "ANNOTATION_MARKER",
    "load_previous",
    "render_registry",
    "strip_header",
    "write_registry",
]
