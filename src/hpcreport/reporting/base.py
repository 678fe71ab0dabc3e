"""
base.py - Renderer protocol and format registry.

A renderer turns a finished ``Aggregate`` into the bytes of one report format.
Renderers are looked up by format name, the same way file readers are looked
up by extension: a dictionary from name to implementation.
"""

from typing import Dict, List, Protocol, runtime_checkable

from hpcreport import logger
from hpcreport.core.models import Aggregate
from hpcreport.exceptions import InvalidFormatError, log_and_raise


@runtime_checkable
class ReportRenderer(Protocol):
    """Renders an aggregate into a report."""

    def render(self, aggregate: Aggregate) -> bytes:
        ...


FORMAT_RENDERERS: Dict[str, ReportRenderer] = {}


def register_renderer(name: str, renderer: ReportRenderer) -> None:
    """Make ``renderer`` available under ``name``."""
    if not isinstance(renderer, ReportRenderer):
        raise TypeError(f"{type(renderer).__name__} does not implement render()")
    FORMAT_RENDERERS[name.lower()] = renderer


def available_formats() -> List[str]:
    return sorted(FORMAT_RENDERERS)


def get_renderer(format_name: str) -> ReportRenderer:
    """
    Look up the renderer for ``format_name`` (case-insensitive).

    Raises:
        InvalidFormatError: If no renderer is registered under that name
    """
    renderer = FORMAT_RENDERERS.get(format_name.lower())
    if renderer is None:
        log_and_raise(InvalidFormatError(format_name), logger)
    return renderer


def render(aggregate: Aggregate, format_name: str) -> bytes:
    """Render ``aggregate`` in the named format."""
    return get_renderer(format_name).render(aggregate)
