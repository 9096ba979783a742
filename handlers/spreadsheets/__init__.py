"""
Spreadsheets handler package.

Exports SpreadsheetsHandler class for document creation and search.
"""
from handlers.spreadsheets.handler import SpreadsheetsHandler

__all__ = ["SpreadsheetsHandler"]
