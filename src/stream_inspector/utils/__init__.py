"""Utility modules for stream-inspector."""

from stream_inspector.utils.logging import get_logger, setup_logging

__all__ = ["setup_logging", "get_logger"]
