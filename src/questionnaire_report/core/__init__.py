# ============================================================================
# src/questionnaire_report/core/__init__.py
# ============================================================================
"""
Core data-resolution layer: resource index, value-set expansion and
bundle normalization.
"""

from .resources import ResourceType, iter_resources, strip_version
from .canonical_index import CanonicalIndex, CanonicalIndexBuilder, index_resources
from .loader import LoadedFile, LoadReport, DefinitionCorpus, load_definitions, load_resource_file
from .expansion import (
    ExpansionReport,
    resolve_options,
    expand_items,
    expand_questionnaire,
    expand_document,
    expand_definition_files,
)
from .normalizer import (
    BundleNormalizer,
    ExtractionSlot,
    NormalizedReportUnit,
    ReportSection,
    normalize,
)

__all__ = [
    "ResourceType",
    "iter_resources",
    "strip_version",
    "CanonicalIndex",
    "CanonicalIndexBuilder",
    "index_resources",
    "LoadedFile",
    "LoadReport",
    "DefinitionCorpus",
    "load_definitions",
    "load_resource_file",
    "ExpansionReport",
    "resolve_options",
    "expand_items",
    "expand_questionnaire",
    "expand_document",
    "expand_definition_files",
    "BundleNormalizer",
    "ExtractionSlot",
    "NormalizedReportUnit",
    "ReportSection",
    "normalize",
]
