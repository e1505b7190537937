"""Utility functions and classes."""

from .logging_utils import setup_logging, get_logger, TqdmLoggingHandler
from .config import load_config, read_config, save_config, merge_configs, Config

__all__ = [
    "setup_logging",
    "get_logger",
    "TqdmLoggingHandler",
    "load_config",
    "read_config",
    "save_config",
    "merge_configs",
    "Config",
]
