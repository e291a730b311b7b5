"""
Utility helpers.
"""

from .log_setup import configure_logging
from .random import random_sites

__all__ = ['configure_logging', 'random_sites']
