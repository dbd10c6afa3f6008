"""
Build Settings
Reads build configuration from the environment (.env is loaded by the entry point)
"""

import os
from typing import Any, Dict, Optional

from src.models.build import BuildSettings
from src.utils.logging_config import get_logger

logger = get_logger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}

# Environment variable -> BuildSettings field
ENV_FIELDS = {
    "LATEX_ENGINE": "engine",
    "LATEX_PASSES": "passes",
    "LATEX_SHELL_ESCAPE": "shell_escape",
    "PDF_OUTPUT_DIR": "output_dir",
    "BUILD_LOG_FILE": "log_file",
    "SOURCE_EXTENSION": "source_extension",
}


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in _TRUE_VALUES


def load_settings(overrides: Optional[Dict[str, Any]] = None) -> BuildSettings:
    """
    Builds settings from environment variables, then applies explicit overrides.

    Args:
        overrides: Field values that win over the environment (None values are ignored)

    Returns:
        Validated BuildSettings

    Raises:
        pydantic.ValidationError: If a value is invalid (e.g. LATEX_PASSES=0)
    """
    values: Dict[str, Any] = {}

    for env_name, field in ENV_FIELDS.items():
        raw = os.getenv(env_name)
        if raw is None or raw == "":
            continue
        values[field] = _parse_bool(raw) if field == "shell_escape" else raw

    for field, value in (overrides or {}).items():
        if value is not None:
            values[field] = value

    settings = BuildSettings(**values)
    logger.debug(f"Build settings: {settings.model_dump()}")
    return settings
