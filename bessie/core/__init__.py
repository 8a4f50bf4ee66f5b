"""
Core module - Contains configuration, logging, errors and the engine.
"""

from bessie.core.config import BessieConfig
from bessie.core.logging import configure_logging, get_secure_logger, SecureLogFilter

__all__ = ["BessieConfig", "configure_logging", "get_secure_logger", "SecureLogFilter"]
