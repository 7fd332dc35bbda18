"""Utility helpers for the harness."""

from .logging import configure_logging

__all__ = ["configure_logging"]
