"""LHDN Calc - Malaysian personal income tax and relief tracking."""

__version__ = "0.1.0"
