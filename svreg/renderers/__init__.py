"""Renderer implementations for register analysis output.

This package contains the available output formats:
- markdown: GitHub Flavoured Markdown tables
- csv: CSV, one row per register or module
- json: the serialised analysis result
- html: standalone HTML report

All renderers are automatically registered via decorators.
"""

from .base import ReportRenderer, renderer_registry
from .markdown import MarkdownTableRenderer
from .csv import CsvTableRenderer
from .json import JsonRenderer
from .html import HtmlReportRenderer

__all__ = [
    "ReportRenderer",
    "renderer_registry",
    "MarkdownTableRenderer",
    "CsvTableRenderer",
    "JsonRenderer",
    "HtmlReportRenderer",
]
