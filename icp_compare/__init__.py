"""Score an uploaded contact spreadsheet against a saved ICP sheet."""

__version__ = "0.1.0"
