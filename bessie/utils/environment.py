"""
Environment Validation Module
=============================

Checks the Python version and the cryptographic backends the engine
depends on. Fails closed if a critical check does not pass.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum, auto
from importlib import metadata
from typing import Final, List, Optional, Tuple

PYTHON_MIN_VERSION: Final[Tuple[int, int]] = (3, 10)

_BLAKE3_PROBE_KEY: Final[bytes] = bytes(32)


class ValidationResult(Enum):
    """Environment validation result."""
    PASS = auto()
    FAIL = auto()


@dataclass
class ValidationCheck:
    """A single validation check result."""
    name: str
    result: ValidationResult
    message: str
    details: Optional[str] = None


class EnvironmentValidator:
    """
    Validates the runtime environment for the engine.

    Checks:
    - Python version
    - blake3 backend (keyed mode and extendable output)
    - cryptography backend (constant-time comparison)
    """

    def __init__(self) -> None:
        self._checks: List[ValidationCheck] = []

    def validate_python_version(self) -> ValidationCheck:
        """Validate Python version meets the minimum."""
        version = sys.version_info[:2]
        version_str = f"{version[0]}.{version[1]}"

        if version < PYTHON_MIN_VERSION:
            return ValidationCheck(
                "Python Version",
                ValidationResult.FAIL,
                f"Python {version_str} is too old",
                f"Required: >={PYTHON_MIN_VERSION[0]}.{PYTHON_MIN_VERSION[1]}",
            )

        return ValidationCheck("Python Version", ValidationResult.PASS, f"Python {version_str}")

    def validate_blake3_backend(self) -> ValidationCheck:
        """Validate blake3 is installed and supports keyed XOF output."""
        try:
            from blake3 import blake3
        except ImportError:
            return ValidationCheck(
                "BLAKE3 Backend",
                ValidationResult.FAIL,
                "blake3 package not installed",
                "Install: pip install blake3",
            )

        hasher = blake3(b"", key=_BLAKE3_PROBE_KEY)
        long_out = hasher.digest(length=64)
        if len(long_out) != 64 or long_out[:32] != hasher.digest():
            return ValidationCheck(
                "BLAKE3 Backend",
                ValidationResult.FAIL,
                "blake3 extendable output is inconsistent",
            )

        return ValidationCheck(
            "BLAKE3 Backend",
            ValidationResult.PASS,
            f"blake3 {metadata.version('blake3')}",
        )

    def validate_cryptography_backend(self) -> ValidationCheck:
        """Validate the cryptography package for constant-time comparison."""
        try:
            from cryptography.hazmat.primitives import constant_time
        except ImportError:
            return ValidationCheck(
                "Cryptography Backend",
                ValidationResult.FAIL,
                "cryptography package not installed",
                "Install: pip install cryptography>=41.0.0",
            )

        if not constant_time.bytes_eq(b"probe", b"probe") or constant_time.bytes_eq(b"probe", b"prob3"):
            return ValidationCheck(
                "Cryptography Backend",
                ValidationResult.FAIL,
                "constant-time comparison returned a wrong result",
            )

        return ValidationCheck(
            "Cryptography Backend",
            ValidationResult.PASS,
            f"cryptography {metadata.version('cryptography')}",
        )

    def run_all_checks(self) -> bool:
        """
        Run all environment checks.

        Returns:
            True if no check failed
        """
        self._checks = [
            self.validate_python_version(),
            self.validate_blake3_backend(),
            self.validate_cryptography_backend(),
        ]

        return all(c.result is not ValidationResult.FAIL for c in self._checks)

    def get_checks(self) -> List[ValidationCheck]:
        """Get all check results."""
        return self._checks.copy()

    def format_report(self) -> str:
        """Render the check results as text."""
        icons = {
            ValidationResult.PASS: "✓",
            ValidationResult.FAIL: "✗",
        }
        lines = []
        for check in self._checks:
            lines.append(f"[{icons[check.result]}] {check.name}: {check.message}")
            if check.details:
                lines.append(f"    → {check.details}")
        return "\n".join(lines)


def require_valid_environment() -> bool:
    """
    Validate environment and exit if requirements are not met.

    Raises:
        SystemExit: If validation fails
    """
    validator = EnvironmentValidator()
    if not validator.run_all_checks():
        print(validator.format_report(), file=sys.stderr)
        print("\nEnvironment validation FAILED.", file=sys.stderr)
        sys.exit(1)
    return True
