"""
Sheets handler package.

Exports SheetsHandler class for sheet structure operations.
"""
from handlers.sheets.handler import SheetsHandler

__all__ = ["SheetsHandler"]
