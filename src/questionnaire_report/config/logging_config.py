# ============================================================================
# src/questionnaire_report/config/logging_config.py
# ============================================================================
"""
Logging Settings
- Log level
- Run log file
- Structured output
"""

from pydantic import Field
from pydantic_settings import BaseSettings

class LoggingSettings(BaseSettings):
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level"
    )
    LOG_FILE_NAME: str = Field(
        default="log.txt",
        description="Run log written inside the output directory"
    )
    LOG_JSON: bool = Field(
        default=False,
        description="Emit log records as JSON lines"
    )

logging_settings = LoggingSettings()
