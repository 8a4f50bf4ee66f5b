"""
Engine Configuration Module
===========================

Immutable, environment-aware configuration for the chunked AEAD engine.

Only scheduling and logging are configurable. Wire constants (key,
nonce, tag and chunk sizes) are fixed and never read from config.

Security Features:
- Immutable configuration after initialization
- Environment variable override support
- Keys that look sensitive are never read from the environment
"""

from __future__ import annotations

import hashlib
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final, Optional


_SENSITIVE_KEYS: Final[frozenset[str]] = frozenset({
    "password", "secret", "key", "token", "api_key",
    "private", "credential", "auth", "salt", "nonce",
})

_TRUE_VALUES: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


def _is_sensitive_key(key: str) -> bool:
    """Check if a configuration key might contain sensitive data."""
    key_lower = key.lower()
    return any(sensitive in key_lower for sensitive in _SENSITIVE_KEYS)


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """
    Chunk scheduling settings.

    max_workers == 1 keeps the sequential loop. With more workers, a
    message of at least parallel_min_chunks chunks is split across a
    thread pool.
    """

    max_workers: int = 1
    parallel_min_chunks: int = 4

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if self.parallel_min_chunks < 2:
            raise ValueError("parallel_min_chunks must be at least 2")


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Immutable logging configuration."""

    level: str = "WARNING"
    enable_console: bool = True
    enable_file: bool = False
    enable_json: bool = False
    log_dir: Optional[Path] = None

    def __post_init__(self) -> None:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if self.level.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {self.level}")
        if self.log_dir is not None and not self.log_dir.is_absolute():
            raise ValueError(f"log_dir must be an absolute path: {self.log_dir}")


class BessieConfig:
    """
    Centralized, immutable configuration loader with environment override support.

    Usage:
        config = BessieConfig.load()
        workers = config.engine.max_workers

    Environment variables use the BESSIE_ prefix and double underscores
    for nested values:
        BESSIE_ENGINE__MAX_WORKERS=4
        BESSIE_LOGGING__LEVEL=DEBUG
    """

    __slots__ = ("_engine", "_logging", "_frozen", "_config_hash")

    _instance: Optional[BessieConfig] = None

    def __init__(
        self,
        engine: Optional[EngineConfig] = None,
        logging: Optional[LoggingConfig] = None,
    ) -> None:
        """Initialize configuration. Use BessieConfig.load() for standard initialization."""
        object.__setattr__(self, "_frozen", False)
        object.__setattr__(self, "_engine", engine or EngineConfig())
        object.__setattr__(self, "_logging", logging or LoggingConfig())
        object.__setattr__(self, "_config_hash", self._compute_hash())
        object.__setattr__(self, "_frozen", True)

    def _compute_hash(self) -> str:
        """Compute a hash of the configuration for integrity checking."""
        config_str = f"{self._engine}|{self._logging}"
        return hashlib.sha256(config_str.encode()).hexdigest()[:16]

    @property
    def engine(self) -> EngineConfig:
        return self._engine

    @property
    def logging(self) -> LoggingConfig:
        return self._logging

    @property
    def config_hash(self) -> str:
        """Get configuration integrity hash."""
        return self._config_hash

    @classmethod
    def load(cls, env_prefix: str = "BESSIE") -> BessieConfig:
        """
        Load configuration with environment variable overrides.

        Args:
            env_prefix: Prefix for environment variables (default: BESSIE)

        Returns:
            Configured BessieConfig instance

        Raises:
            ValueError: If an override has an invalid value
        """
        env_overrides = cls._parse_env_overrides(env_prefix)

        engine_kwargs: dict[str, Any] = {}
        if "engine.max_workers" in env_overrides:
            engine_kwargs["max_workers"] = int(env_overrides["engine.max_workers"])
        if "engine.parallel_min_chunks" in env_overrides:
            engine_kwargs["parallel_min_chunks"] = int(env_overrides["engine.parallel_min_chunks"])

        logging_kwargs: dict[str, Any] = {}
        if "logging.level" in env_overrides:
            logging_kwargs["level"] = env_overrides["logging.level"]
        if "logging.enable_console" in env_overrides:
            logging_kwargs["enable_console"] = env_overrides["logging.enable_console"].lower() in _TRUE_VALUES
        if "logging.enable_file" in env_overrides:
            logging_kwargs["enable_file"] = env_overrides["logging.enable_file"].lower() in _TRUE_VALUES
        if "logging.enable_json" in env_overrides:
            logging_kwargs["enable_json"] = env_overrides["logging.enable_json"].lower() in _TRUE_VALUES
        if "logging.log_dir" in env_overrides:
            logging_kwargs["log_dir"] = Path(env_overrides["logging.log_dir"])

        return cls(
            engine=EngineConfig(**engine_kwargs) if engine_kwargs else None,
            logging=LoggingConfig(**logging_kwargs) if logging_kwargs else None,
        )

    @staticmethod
    def _parse_env_overrides(prefix: str) -> dict[str, str]:
        """Parse environment variables with the given prefix."""
        overrides: dict[str, str] = {}
        prefix_upper = f"{prefix.upper()}_"

        for key, value in os.environ.items():
            if key.startswith(prefix_upper):
                # BESSIE_SECTION__KEY -> section.key
                config_key = key[len(prefix_upper):].lower().replace("__", ".")

                if _is_sensitive_key(config_key):
                    continue

                overrides[config_key] = value

        return overrides

    @classmethod
    def get_instance(cls) -> BessieConfig:
        """Get or create the singleton configuration instance."""
        if cls._instance is None:
            cls._instance = cls.load()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Reset the singleton instance. Use only for testing."""
        cls._instance = None

    def __repr__(self) -> str:
        return f"BessieConfig(hash={self._config_hash}, workers={self._engine.max_workers})"

    def __setattr__(self, name: str, value: Any) -> None:
        """Prevent modification after initialization."""
        if hasattr(self, "_frozen") and self._frozen:
            raise AttributeError("BessieConfig is immutable after initialization")
        super().__setattr__(name, value)
