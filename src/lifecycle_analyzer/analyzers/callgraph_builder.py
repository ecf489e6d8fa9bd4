from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from lifecycle_analyzer.analyzers.entry_synthesizer import SyntheticEntryMethod
from lifecycle_analyzer.models.records import LifecycleMethodRecord
from lifecycle_analyzer.telemetry import span
from lifecycle_analyzer.tools.cha_callgraph import CallGraph, CallGraphBackend

logger = logging.getLogger(__name__)

STRATEGY_SYNTHETIC = "synthetic_entry"
STRATEGY_LIFECYCLE = "lifecycle_entries"
STRATEGY_NONE = "none"


@dataclass
class CallGraphSummary:
    graph: Optional[CallGraph] = None
    strategy: str = STRATEGY_NONE
    entry_points: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def node_count(self) -> int:
        return self.graph.node_count if self.graph else 0

    @property
    def edge_count(self) -> int:
        return self.graph.edge_count if self.graph else 0

    @property
    def available(self) -> bool:
        return self.graph is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "strategy": self.strategy,
            "entry_point_count": len(self.entry_points),
            "node_count": self.node_count,
            "edge_count": self.edge_count,
            "error": self.error,
        }


class LifecycleCallGraphBuilder:
    """Chooses entry points and delegates call-target resolution to ``backend``."""

    def __init__(self, backend: CallGraphBackend) -> None:
        self.backend = backend

    def build(
        self,
        entry: SyntheticEntryMethod,
        records: Sequence[LifecycleMethodRecord],
    ) -> CallGraphSummary:
        summary = CallGraphSummary()
        try:
            if self.backend.has_method(entry.signature):
                summary.strategy = STRATEGY_SYNTHETIC
                summary.entry_points = [entry.signature]
            else:
                logger.info("Synthetic entry %s not resolvable; using lifecycle methods as roots", entry.signature)
                summary.entry_points = list(dict.fromkeys(r.signature for r in records))
                summary.strategy = STRATEGY_LIFECYCLE if summary.entry_points else STRATEGY_NONE
            if summary.entry_points:
                with span("stage.callgraph", strategy=summary.strategy, entry_count=len(summary.entry_points)):
                    summary.graph = self.backend.build_from_entry_points(summary.entry_points)
        except Exception as exc:
            logger.warning("Call graph construction failed: %s", exc)
            summary.graph = None
            summary.error = str(exc)
        return summary
