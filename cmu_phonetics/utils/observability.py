"""Structured logging, Prometheus metrics and OpenTelemetry spans.

Metric constructors are safe to call repeatedly: a name that is already
registered returns the existing collector, so several engines can share one
process.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Optional

from opentelemetry import trace
from prometheus_client import REGISTRY, Counter, Gauge, Histogram

_TRACER_NAME = "cmu_phonetics"


class StructuredLoggerAdapter(logging.LoggerAdapter):
    """Adapter that appends bound and per-call context to messages as JSON."""

    def bind(self, **context: Any) -> "StructuredLoggerAdapter":
        merged = dict(self.extra)
        merged.update(context)
        return StructuredLoggerAdapter(self.logger, merged)

    def process(self, msg: str, kwargs: Dict[str, Any]):
        event_context: Dict[str, Any] = dict(self.extra)
        provided = kwargs.pop("context", None)
        if isinstance(provided, dict):
            event_context.update(provided)
        if event_context:
            payload = json.dumps(event_context, sort_keys=True, default=str)
            msg = f"{msg} | {payload}"
        return msg, kwargs


def get_logger(name: str, **context: Any) -> StructuredLoggerAdapter:
    """Return a project logger with optional bound context."""

    return StructuredLoggerAdapter(logging.getLogger(name), context)


def _registered(name: str, factory, *args: Any, **kwargs: Any):
    """Create a collector, reusing the one already registered under ``name``."""

    try:
        return factory(name, *args, **kwargs)
    except ValueError:
        existing = getattr(REGISTRY, "_names_to_collectors", {}).get(name)
        if existing is None:
            raise
        return existing


class _MetricHandle:
    def __init__(self, impl: Any) -> None:
        self._impl = impl

    def labels(self, **labels: Any):
        return self.__class__(self._impl.labels(**labels))


class CounterHandle(_MetricHandle):
    def inc(self, amount: float = 1.0) -> None:
        self._impl.inc(amount)


class GaugeHandle(_MetricHandle):
    def set(self, value: float) -> None:
        self._impl.set(value)


class HistogramHandle(_MetricHandle):
    def observe(self, value: float) -> None:
        self._impl.observe(value)


def create_counter(
    name: str,
    documentation: str,
    label_names: Optional[Iterable[str]] = None,
) -> CounterHandle:
    return CounterHandle(
        _registered(name, Counter, documentation, labelnames=tuple(label_names or ()))
    )


def create_gauge(
    name: str,
    documentation: str,
    label_names: Optional[Iterable[str]] = None,
) -> GaugeHandle:
    return GaugeHandle(
        _registered(name, Gauge, documentation, labelnames=tuple(label_names or ()))
    )


def create_histogram(
    name: str,
    documentation: str,
    label_names: Optional[Iterable[str]] = None,
) -> HistogramHandle:
    return HistogramHandle(
        _registered(name, Histogram, documentation, labelnames=tuple(label_names or ()))
    )


@contextmanager
def start_span(name: str, attributes: Optional[Dict[str, Any]] = None):
    """Start an OpenTelemetry span named ``name`` as the current span."""

    tracer = trace.get_tracer(_TRACER_NAME)
    with tracer.start_as_current_span(name) as span:
        if attributes:
            add_span_attributes(span, attributes)
        yield span


def add_span_attributes(span: Any, attributes: Dict[str, Any]) -> None:
    if span is None:
        return
    for key, value in attributes.items():
        if isinstance(key, str) and value is not None:
            span.set_attribute(key, value)


def record_exception(span: Any, error: BaseException) -> None:
    if span is None:
        return
    span.record_exception(error)
    span.set_attribute("error", True)


__all__ = [
    "CounterHandle",
    "GaugeHandle",
    "HistogramHandle",
    "StructuredLoggerAdapter",
    "add_span_attributes",
    "create_counter",
    "create_gauge",
    "create_histogram",
    "get_logger",
    "record_exception",
    "start_span",
]
