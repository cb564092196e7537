"""
Core client components: backend contract, gspread backend, sheet client.
"""
from .backend import SheetBackend
from .gspread_backend import GspreadBackend
from .sheet_client import SheetClient

__all__ = [
    "SheetBackend",
    "GspreadBackend",
    "SheetClient",
]
