"""Solflow API: Solana workflow-builder gateway."""

__version__ = "1.0.0"
