"""
Category Sorter
===============

Sorts the files of a directory into category folders by extension.

Features:
- Extension based categories (Images, Documents, Videos, Audio) with
  --only/--except selection
- Duplicate detection by content hash, resolved interactively per group
- Per-file error isolation: one unreadable or conflicting file never
  stops the run
"""

__version__ = "0.1.0"
