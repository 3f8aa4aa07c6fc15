# ============================================================================
# src/questionnaire_report/config/fhir_config.py
# ============================================================================
"""
FHIR Input Settings
- Version
- Validation
- Clinical context resource types
- Canonical URL collision policy
"""

from enum import Enum
from typing import List, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class DuplicateUrlPolicy(str, Enum):
    LAST_WRITE_WINS = "last_write_wins"    # later-loaded files take precedence
    FIRST_WRITE_WINS = "first_write_wins"
    ERROR = "error"                        # raise DuplicateCanonicalUrlError


class FHIRSettings(BaseSettings):
    FHIR_VERSION: Literal["R4", "R4B", "R5"] = Field(
        default="R4",
        description="FHIR specification version of the corpus"
    )
    FHIR_VALIDATE: bool = Field(
        default=False,
        description="Validate definitional resources against the fhir.resources models (warnings only)"
    )
    CLINICAL_CONTEXT_TYPES: List[str] = Field(
        default_factory=lambda: ["CarePlan", "Encounter"],
        description="Resource types accepted as the report's clinical context, placeholder uses the first"
    )
    DUPLICATE_URL_POLICY: DuplicateUrlPolicy = Field(
        default=DuplicateUrlPolicy.LAST_WRITE_WINS,
        description="What to do when two definitions register the same canonical URL"
    )

    @field_validator("CLINICAL_CONTEXT_TYPES")
    @classmethod
    def validate_context_types(cls, v: List[str]) -> List[str]:
        allowed = {"CarePlan", "Encounter"}
        if not v or not set(v) <= allowed:
            raise ValueError(f"CLINICAL_CONTEXT_TYPES must be a non-empty subset of {sorted(allowed)}")
        return v

fhir_settings = FHIRSettings()
