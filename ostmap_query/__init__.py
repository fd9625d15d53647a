"""ostmap-query: translate search requests into range scans over a sorted key-value store."""

__version__ = "0.1.0"
