"""Observability – structured logging helpers."""
from listquery.observability.logging.factory import JsonLoggerFactory, configure_logging
from listquery.observability.logging.processors import RequestKeyProcessor, get_logger

__all__ = ["JsonLoggerFactory", "RequestKeyProcessor", "configure_logging", "get_logger"]
