# ============================================================================
# src/questionnaire_report/config/base_config.py
# ============================================================================
"""
Base Configuration
- Project root
- Definitional corpus (questionnaires, value sets, code systems)
- Input corpus (patient bundles with responses)
- Report output directory
"""

from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings

class BaseSettingsConfig(BaseSettings):
    # Root project directory
    PROJECT_ROOT: Path = Field(
        default_factory=lambda: Path(__file__).parent.parent.parent.parent,
        description="Root directory of the project"
    )

    # Definitional corpus, rewritten in place by value-set expansion
    DEFINITIONS_DIR: Path = Field(
        default=Path("questionnaires"),
        description="Questionnaire, ValueSet and CodeSystem definitions (single resources or bundles)"
    )

    # Input corpus
    INPUT_DIR: Path = Field(
        default=Path("input"),
        description="Patient bundles / QuestionnaireResponses to report on. Never written."
    )

    # Output
    OUTPUT_DIR: Path = Field(
        default=Path("output"),
        description="Rendered reports and the run log"
    )

    CLEAN_OUTPUT: bool = Field(
        default=True,
        description="Remove previous output before a run"
    )

# Global instance
base_settings = BaseSettingsConfig()
