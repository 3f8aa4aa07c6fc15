# ============================================================================
# src/questionnaire_report/__init__.py
# ============================================================================
"""
Questionnaire Report Engine

Prepares FHIR Questionnaire / QuestionnaireResponse data for rendering:
- canonical URL index over the definitional corpus
- offline value-set expansion of Questionnaire answer lists
- bundle normalization with placeholder fallbacks for the report header
"""

__version__ = "0.1.0"

from .core import (
    CanonicalIndex,
    BundleNormalizer,
    NormalizedReportUnit,
    index_resources,
    resolve_options,
    expand_items,
    normalize,
    load_definitions,
)
from .pipeline import ReportPipeline, RunSummary

__all__ = [
    "CanonicalIndex",
    "BundleNormalizer",
    "NormalizedReportUnit",
    "index_resources",
    "resolve_options",
    "expand_items",
    "normalize",
    "load_definitions",
    "ReportPipeline",
    "RunSummary",
]
