# ============================================================================
# src/questionnaire_report/config/__init__.py
# ============================================================================
"""
Convenient imports for all settings
"""

from .base_config import base_settings
from .fhir_config import fhir_settings, DuplicateUrlPolicy
from .limits_config import limit_settings
from .logging_config import logging_settings
