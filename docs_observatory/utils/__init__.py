"""Shared helpers: error handling and numeric formatting."""
