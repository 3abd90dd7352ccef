"""Utility functions for prefixbus."""

from prefixbus.utils.logging import configure_logging

__all__ = ["configure_logging"]
