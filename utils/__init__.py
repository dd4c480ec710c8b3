"""Utility functions and logging for Fellah Weather"""

from .helpers import load_yaml_mapping
from .logging_setup import setup_logging

__all__ = ["load_yaml_mapping", "setup_logging"]
