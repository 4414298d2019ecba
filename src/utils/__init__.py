"""Shared utilities for configuration and logging"""

from src.utils.logging_config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
