"""Shared utilities for marmota."""

from marmota.utils.logger import get_logger

__all__ = ["get_logger"]
