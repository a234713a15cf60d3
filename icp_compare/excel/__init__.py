"""Spreadsheet parsing and column resolution."""
