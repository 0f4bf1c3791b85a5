"""Shared helpers: logging and configuration."""

from .logging import get_logger
from .config import load_config

__all__ = ["get_logger", "load_config"]
