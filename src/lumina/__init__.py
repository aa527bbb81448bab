"""Lumina Studio: manuscript editing, checkpoints and page preview."""

__version__ = "0.1.0"
