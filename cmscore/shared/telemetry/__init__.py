"""Shared telemetry: logging setup and tracing helpers."""

from cmscore.shared.telemetry.logging import configure_package_levels, get_logger, setup_logging
from cmscore.shared.telemetry.tracing import add_span_attributes, traced

__all__ = [
    "setup_logging",
    "configure_package_levels",
    "get_logger",
    "traced",
    "add_span_attributes",
]
