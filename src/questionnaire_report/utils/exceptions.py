# ============================================================================
# src/questionnaire_report/utils/exceptions.py
# ============================================================================
"""
Custom exceptions for the questionnaire report engine.
"""

from pathlib import Path


class QuestionnaireReportError(Exception):
    """Base exception for all questionnaire report errors."""
    pass


class ConfigurationError(QuestionnaireReportError):
    """Invalid configuration."""
    pass


class DefinitionsDirectoryError(QuestionnaireReportError):
    """Definitional corpus directory is missing. Fatal for the whole run."""
    def __init__(self, directory: Path):
        super().__init__(f"Source directory '{directory}' does not exist.")
        self.directory = directory


class ResourceFileError(QuestionnaireReportError):
    """A resource file cannot be used. Recoverable at file granularity."""
    def __init__(self, message: str, path: Path):
        super().__init__(message)
        self.path = path


class EmptyResourceFileError(ResourceFileError):
    """Resource file has no content."""
    pass


class OversizedResourceFileError(ResourceFileError):
    """Resource file exceeds the configured size ceiling."""
    def __init__(self, message: str, path: Path, size: int, limit: int):
        super().__init__(message, path)
        self.size = size
        self.limit = limit


class InvalidResourceFileError(ResourceFileError):
    """Resource file is not parseable JSON or not a JSON object."""
    pass


class DuplicateCanonicalUrlError(QuestionnaireReportError):
    """Two different resources registered the same canonical URL."""
    def __init__(self, url: str):
        super().__init__(f"Canonical URL registered by more than one resource: {url}")
        self.url = url
