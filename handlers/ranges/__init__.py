"""
Ranges handler package.

Exports RangesHandler class for cell range operations.
"""
from handlers.ranges.handler import RangesHandler

__all__ = ["RangesHandler"]
