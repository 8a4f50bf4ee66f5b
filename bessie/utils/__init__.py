"""
Utils module - Argument validation and environment checks.
"""

from bessie.utils.validators import (
    as_readable,
    as_writable,
    validate_exact_length,
    validate_key,
)
from bessie.utils.environment import EnvironmentValidator, require_valid_environment

__all__ = [
    "as_readable",
    "as_writable",
    "validate_exact_length",
    "validate_key",
    "EnvironmentValidator",
    "require_valid_environment",
]
