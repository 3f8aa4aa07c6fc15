# ============================================================================
# src/questionnaire_report/report/renderer.py
# ============================================================================
"""
Report Renderer Interface

The renderer turns one assembled payload into an output file. Browser
based PDF rendering lives outside this package; it only has to implement
BaseReportRenderer. JsonReportWriter is the built-in implementation and
writes the payload itself, which is what an offline renderer consumes.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict
import logging

from ..utils.file_utils import write_json


class BaseReportRenderer(ABC):
    """
    Abstract base class for report renderers.

    Renderers are driven strictly sequentially: one render() call
    completes before the next begins.
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    @abstractmethod
    def extension(self) -> str:
        """Output file extension, including the dot."""
        pass

    @abstractmethod
    def render(self, payload: Dict[str, Any], output_path: Path) -> Path:
        """
        Render a payload.

        Args:
            payload: Result of build_render_payload()
            output_path: Target file

        Returns:
            Path of the written file
        """
        pass

    def close(self):
        """Release any session held by the renderer."""
        pass


class JsonReportWriter(BaseReportRenderer):
    """Writes the render payload as two-space indented JSON."""

    @property
    def extension(self) -> str:
        return ".json"

    def render(self, payload: Dict[str, Any], output_path: Path) -> Path:
        write_json(payload, output_path, indent=2)
        self.logger.debug(f"Wrote render payload to {output_path}")
        return output_path
