"""
Output formatting for Marks.
"""

from .formatter import ResultFormatter

__all__ = ['ResultFormatter']
