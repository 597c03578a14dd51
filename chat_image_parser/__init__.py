"""Extracts product data from images through web chat assistants and merges it into Excel."""

__version__ = "1.0.0"
