from __future__ import annotations

from lifecycle_analyzer.telemetry.tracing import (
    current_run_context,
    init_telemetry,
    set_run_context,
    span,
)

__all__ = ["current_run_context", "init_telemetry", "set_run_context", "span"]
