"""
Utils Package

Contains utility modules for bluetelemetry.
"""

from .logger import setup_line_capture, setup_logger
from .name_sort import compare_names, name_sort_key, sorted_names, split_numeric_suffix

__all__ = [
    'setup_line_capture',
    'setup_logger',
    'compare_names',
    'name_sort_key',
    'sorted_names',
    'split_numeric_suffix',
]
