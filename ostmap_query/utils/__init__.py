"""Utility modules for ostmap-query."""
