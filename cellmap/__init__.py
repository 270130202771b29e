"""Range-scoped name/value extraction from spreadsheet grids for the asset dashboard."""

__version__ = "0.1.0"
