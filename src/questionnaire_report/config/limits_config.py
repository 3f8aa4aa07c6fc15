# ============================================================================
# src/questionnaire_report/config/limits_config.py
# ============================================================================
"""
Safety Limits
- Input file size ceiling
- Logged error message length
- Output file name length
"""

from pydantic import Field
from pydantic_settings import BaseSettings

class LimitSettings(BaseSettings):
    MAX_JSON_FILE_BYTES: int = Field(
        default=50 * 1024 * 1024,
        gt=0,
        description="Resource files larger than this are skipped (50MB)"
    )
    ERROR_MESSAGE_MAX_LENGTH: int = Field(
        default=200,
        gt=0,
        description="Per-file error messages are truncated to this many characters before logging"
    )
    MAX_OUTPUT_NAME_LENGTH: int = Field(
        default=100,
        gt=0,
        description="Maximum length of a sanitized report file name"
    )

limit_settings = LimitSettings()
