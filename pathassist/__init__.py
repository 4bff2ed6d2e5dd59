"""Path Assistant — a progress path with success and failure closed stages."""

__version__ = "0.1.0"
