"""Structured logging for the ICP comparison tool."""
