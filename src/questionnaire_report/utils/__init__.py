# src/questionnaire_report/utils/__init__.py

from .exceptions import (
    QuestionnaireReportError,
    ConfigurationError,
    DefinitionsDirectoryError,
    ResourceFileError,
    EmptyResourceFileError,
    OversizedResourceFileError,
    InvalidResourceFileError,
    DuplicateCanonicalUrlError,
)
from .logging import setup_logging, get_logger, truncate_message, JsonFormatter

__all__ = [
    "QuestionnaireReportError",
    "ConfigurationError",
    "DefinitionsDirectoryError",
    "ResourceFileError",
    "EmptyResourceFileError",
    "OversizedResourceFileError",
    "InvalidResourceFileError",
    "DuplicateCanonicalUrlError",
    "setup_logging",
    "get_logger",
    "truncate_message",
    "JsonFormatter",
]
