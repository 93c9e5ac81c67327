"""Utility helpers shared across the :mod:`cmu_phonetics` package."""

from __future__ import annotations

from .observability import (
    StructuredLoggerAdapter,
    add_span_attributes,
    create_counter,
    create_gauge,
    create_histogram,
    get_logger,
    record_exception,
    start_span,
)

__all__ = [
    "StructuredLoggerAdapter",
    "add_span_attributes",
    "create_counter",
    "create_gauge",
    "create_histogram",
    "get_logger",
    "record_exception",
    "start_span",
]
