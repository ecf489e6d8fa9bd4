from __future__ import annotations

import os
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor


_ANALYSIS_ID: ContextVar[str | None] = ContextVar("analysis_id", default=None)
_RUN_ID: ContextVar[str | None] = ContextVar("run_id", default=None)
_CATALOG_VERSION: ContextVar[str | None] = ContextVar("catalog_version", default=None)


def init_telemetry(settings: Dict[str, Any]) -> bool:
    conf = settings.get("telemetry", {}) if settings else {}
    if not conf.get("enabled"):
        return False
    service_name = conf.get("service_name", "lifecycle-analyzer")
    endpoint = conf.get("otlp_endpoint") or os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT")
    if not endpoint:
        return False
    insecure = conf.get("otlp_insecure", True)
    resource = Resource.create({"service.name": service_name})
    provider = TracerProvider(resource=resource)
    exporter = OTLPSpanExporter(endpoint=endpoint, insecure=insecure)
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)
    return True


def set_run_context(analysis_id: str, catalog_version: str | None = None) -> str:
    run_id = uuid.uuid4().hex
    _ANALYSIS_ID.set(analysis_id)
    _RUN_ID.set(run_id)
    if catalog_version:
        _CATALOG_VERSION.set(catalog_version)
    return run_id


def current_run_context() -> Dict[str, Optional[str]]:
    return {
        "analysis_id": _ANALYSIS_ID.get(),
        "run_id": _RUN_ID.get(),
        "catalog_version": _CATALOG_VERSION.get(),
    }


@contextmanager
def span(name: str, **attrs: Any):
    tracer = trace.get_tracer("lifecycle_analyzer")
    with tracer.start_as_current_span(name) as current:
        _apply_common_attrs(current)
        for key, value in attrs.items():
            if value is None:
                continue
            current.set_attribute(key, value)
        yield current


def _apply_common_attrs(span_obj) -> None:
    analysis_id = _ANALYSIS_ID.get()
    run_id = _RUN_ID.get()
    catalog_version = _CATALOG_VERSION.get()
    if analysis_id:
        span_obj.set_attribute("analysis_id", analysis_id)
    if run_id:
        span_obj.set_attribute("run_id", run_id)
    if catalog_version:
        span_obj.set_attribute("catalog_version", catalog_version)
