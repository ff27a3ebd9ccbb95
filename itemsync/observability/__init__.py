"""Structured logging and Prometheus metrics."""

from itemsync.observability.logging import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
