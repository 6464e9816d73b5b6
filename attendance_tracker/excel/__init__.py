"""Spreadsheet I/O: reading, column resolution and write-back."""
