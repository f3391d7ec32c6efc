"""Encrypted contact vault with an interactive shell and vCard export."""

__version__ = "0.1.0"
