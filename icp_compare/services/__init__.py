"""Comparison pipeline services."""
