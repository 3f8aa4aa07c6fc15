# src/questionnaire_report/report/__init__.py
"""
Report assembly and rendering interface.
"""

from .assembly import build_render_payload, subject_display, format_human_name
from .renderer import BaseReportRenderer, JsonReportWriter

__all__ = [
    "build_render_payload",
    "subject_display",
    "format_human_name",
    "BaseReportRenderer",
    "JsonReportWriter",
]
