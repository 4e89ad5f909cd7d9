"""
Marks - Core Package

A search-engine like search tool for Markdown and org-mode files that
understands headings, tags, properties, TODO states and schedules.
"""

__version__ = "0.1.0"
__author__ = "Marks Team"
