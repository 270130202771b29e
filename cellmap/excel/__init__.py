"""Spreadsheet access: workbook decoding, A1 references, ranges and extraction."""
