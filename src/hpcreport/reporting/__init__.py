"""Report renderers, looked up by format name."""

from .base import (
    FORMAT_RENDERERS,
    ReportRenderer,
    available_formats,
    get_renderer,
    register_renderer,
    render,
)
from .codecov import CodecovJsonRenderer
from .lcov import LcovRenderer

register_renderer("codecov", CodecovJsonRenderer())
register_renderer("json", CodecovJsonRenderer())
register_renderer("lcov", LcovRenderer())

__all__ = [
    "FORMAT_RENDERERS",
    "ReportRenderer",
    "available_formats",
    "get_renderer",
    "register_renderer",
    "render",
    "CodecovJsonRenderer",
    "LcovRenderer",
]
