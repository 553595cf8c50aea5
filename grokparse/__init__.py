"""Grok expression compilation, typed field extraction and Ruby hash parsing."""

__version__ = "0.1.0"