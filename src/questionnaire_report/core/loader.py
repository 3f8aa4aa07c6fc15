# ============================================================================
# src/questionnaire_report/core/loader.py
# ============================================================================
"""
Resource File Loading

Reads the definitional corpus and builds the canonical index from it.

Failure handling:
- missing definitions directory -> DefinitionsDirectoryError (fatal)
- empty, oversized or unparseable file -> skipped with a warning,
  loading continues with the remaining files
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
import logging

from ..config import base_settings, fhir_settings, limit_settings
from ..config.fhir_config import DuplicateUrlPolicy
from ..fhir_utils.validator import ResourceValidator
from ..utils.exceptions import DefinitionsDirectoryError, ResourceFileError
from ..utils.file_utils import list_json_files, read_json, validate_json_file
from .canonical_index import CanonicalIndex, CanonicalIndexBuilder
from .resources import Resource, iter_resources

logger = logging.getLogger(__name__)


@dataclass
class LoadedFile:
    """A parsed resource file. ``document`` is the object the index points into."""
    path: Path
    document: Resource


@dataclass
class LoadReport:
    """
    Report from loading a directory of resource files.

    Attributes:
        files_found:   JSON files in the directory.
        files_loaded:  Files parsed and indexed.
        skipped:       Names of files that were rejected.
        warnings:      Human-readable reasons for rejections and
                       schema validation findings.
        urls_indexed:  Canonical URL keys in the resulting index.
    """
    files_found: int = 0
    files_loaded: int = 0
    skipped: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    urls_indexed: int = 0


@dataclass
class DefinitionCorpus:
    directory: Path
    files: List[LoadedFile]
    index: CanonicalIndex
    report: LoadReport


def load_resource_file(path: Path, max_bytes: Optional[int] = None) -> Resource:
    """
    Validate and parse a single resource file.

    Raises:
        ResourceFileError: empty, oversized or malformed file
    """
    validate_json_file(path, max_bytes or limit_settings.MAX_JSON_FILE_BYTES)
    return read_json(path)


def load_definitions(
    directory: Optional[Path] = None,
    policy: Optional[DuplicateUrlPolicy] = None,
    validate: Optional[bool] = None,
) -> DefinitionCorpus:
    """
    Load every definitional file in a directory and index it.

    Files are read in sorted name order, so with last-write-wins the
    alphabetically later file owns a duplicated URL.

    Args:
        directory: Definitions directory (defaults to configuration)
        policy: Duplicate canonical URL policy (defaults to configuration)
        validate: Run fhir.resources schema validation (defaults to configuration)

    Returns:
        DefinitionCorpus with the loaded files, the index and a LoadReport

    Raises:
        DefinitionsDirectoryError: directory does not exist
        DuplicateCanonicalUrlError: policy is ERROR and a URL collides
    """
    directory = directory or base_settings.DEFINITIONS_DIR
    if not directory.is_dir():
        raise DefinitionsDirectoryError(directory)

    validate = fhir_settings.FHIR_VALIDATE if validate is None else validate
    validator = ResourceValidator() if validate else None

    paths = list_json_files(directory)
    report = LoadReport(files_found=len(paths))
    logger.info(f"Loading {len(paths)} definitions from {directory}...")

    builder = CanonicalIndexBuilder(policy)
    files: List[LoadedFile] = []

    for path in paths:
        try:
            document = load_resource_file(path)
        except ResourceFileError as e:
            report.skipped.append(path.name)
            report.warnings.append(str(e))
            logger.warning(f"Skipping invalid file {path.name}: {e}")
            continue

        if validator is not None:
            for resource in iter_resources(document):
                for problem in validator.validate(resource):
                    report.warnings.append(f"{path.name}: {problem}")
                    logger.warning(f"{path.name}: {problem}")

        builder.add(document)
        files.append(LoadedFile(path=path, document=document))
        report.files_loaded += 1

    index = builder.build()
    report.urls_indexed = len(index)
    logger.info(f"Indexed {len(index)} canonical URLs.")

    return DefinitionCorpus(directory=directory, files=files, index=index, report=report)
