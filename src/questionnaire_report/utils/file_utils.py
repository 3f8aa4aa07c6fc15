# ============================================================================
# src/questionnaire_report/utils/file_utils.py
# ============================================================================
"""
File utilities for the questionnaire report engine.
"""

import json
import re
import shutil
from pathlib import Path
from typing import Any, Dict, List

from .exceptions import (
    EmptyResourceFileError,
    InvalidResourceFileError,
    OversizedResourceFileError,
)


_INVALID_NAME_CHARS = re.compile(r'[^a-zA-Z0-9._-]')
_REPEATED_DASHES = re.compile(r'-+')
_ALLOWED_NAME = re.compile(r'^[a-zA-Z0-9._-]+$')


def ensure_directory(path: Path) -> Path:
    """
    Ensure directory exists, create if not.

    Args:
        path: Directory path

    Returns:
        Path to directory
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def reset_directory(path: Path) -> Path:
    """Remove a directory with everything in it and create it empty again."""
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True)
    return path


def list_json_files(directory: Path) -> List[Path]:
    """
    List JSON files directly inside a directory.

    Sorted by file name so that load order, and therefore last-write-wins
    resolution, is the same on every run.

    Args:
        directory: Directory to search

    Returns:
        List of JSON file paths
    """
    if not directory.exists():
        return []

    return sorted(
        (f for f in directory.iterdir() if f.is_file() and f.suffix == '.json'),
        key=lambda p: p.name,
    )


def validate_json_file(file_path: Path, max_bytes: int) -> int:
    """
    Check a resource file before it is read.

    Args:
        file_path: Path to file
        max_bytes: Size ceiling in bytes

    Returns:
        File size in bytes

    Raises:
        OversizedResourceFileError: File is larger than ``max_bytes``
        EmptyResourceFileError: File is empty
    """
    size = file_path.stat().st_size

    if size > max_bytes:
        limit_mb = max_bytes / (1024 * 1024)
        raise OversizedResourceFileError(
            f"File {file_path.name} exceeds maximum size of {limit_mb:g}MB",
            file_path,
            size=size,
            limit=max_bytes,
        )

    if size == 0:
        raise EmptyResourceFileError(f"File {file_path.name} is empty", file_path)

    return size


def read_json(file_path: Path) -> Dict[str, Any]:
    """
    Read a JSON resource file.

    Args:
        file_path: Path to JSON file

    Returns:
        Parsed JSON object

    Raises:
        InvalidResourceFileError: Content is not JSON or not a JSON object
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidResourceFileError(f"Invalid JSON in {file_path.name}: {e}", file_path) from e

    if not isinstance(data, dict):
        raise InvalidResourceFileError(
            f"File {file_path.name} does not contain a JSON object",
            file_path,
        )
    return data


def write_json(data: Dict[str, Any], file_path: Path, indent: int = 2) -> None:
    """
    Write JSON file.

    Args:
        data: Data to write
        file_path: Path to JSON file
        indent: Indentation level
    """
    ensure_directory(file_path.parent)

    with open(file_path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=indent, ensure_ascii=False)


def sanitize_filename(filename: str, max_length: int = 100) -> str:
    """
    Turn an input file name into a safe output base name.

    Args:
        filename: Original filename (``.json`` extension is dropped)
        max_length: Maximum length of the result

    Returns:
        Lowercase name made of ``[a-z0-9._-]`` only
    """
    name = re.sub(r'\.json$', '', filename)

    cleaned = _INVALID_NAME_CHARS.sub('-', name).lower()
    cleaned = _REPEATED_DASHES.sub('-', cleaned).strip('-')

    if not cleaned:
        cleaned = 'unnamed-file'

    if len(cleaned) > max_length:
        cleaned = cleaned[:max_length].rstrip('-')

    if not _ALLOWED_NAME.match(cleaned):
        raise ValueError(f"Invalid filename after sanitization: {cleaned}")

    return cleaned
