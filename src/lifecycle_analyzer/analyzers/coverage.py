from __future__ import annotations

import copy
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Tuple

from lifecycle_analyzer.knowledge.lifecycle_catalog import LifecycleCatalog
from lifecycle_analyzer.models.records import (
    CoverageStat,
    DataFlowRecord,
    LifecycleKind,
    LifecycleMethodRecord,
)

logger = logging.getLogger(__name__)


@dataclass
class CoverageSnapshot:
    coverage: Dict[LifecycleKind, List[CoverageStat]] = field(default_factory=dict)
    ranked_by_usage: List[Tuple[LifecycleKind, str, int]] = field(default_factory=list)
    ranked_by_data_flow_count: List[Tuple[str, int]] = field(default_factory=list)

    def stat(self, kind: LifecycleKind, name: str) -> CoverageStat:
        for stat in self.coverage.get(kind, []):
            if stat.method_name == name:
                return stat
        raise KeyError(f"{kind.value}:{name}")

    def used(self, kind: LifecycleKind) -> List[CoverageStat]:
        return [s for s in self.coverage.get(kind, []) if s.is_used]

    def unused(self, kind: LifecycleKind) -> List[str]:
        return [s.method_name for s in self.coverage.get(kind, []) if not s.is_used]

    def summary(self, kind: LifecycleKind) -> Dict[str, Any]:
        stats = self.coverage.get(kind, [])
        used = [s for s in stats if s.is_used]
        total = len(stats)
        return {
            "defined": total,
            "used": len(used),
            "usage_count": sum(s.usage_count for s in used),
            "coverage_percent": round(100.0 * len(used) / total, 1) if total else 0.0,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "coverage": {
                kind.value: {
                    "summary": self.summary(kind),
                    "entries": [s.to_dict() for s in stats],
                }
                for kind, stats in self.coverage.items()
            },
            "rankedByUsage": [
                {"kind": kind.value, "methodName": name, "usageCount": count}
                for kind, name, count in self.ranked_by_usage
            ],
            "rankedByDataFlowCount": [
                {"method": method, "dataFlowCount": count}
                for method, count in self.ranked_by_data_flow_count
            ],
        }


class CoverageTracker:
    """Additive fold of lifecycle records and data flows into coverage statistics.

    Counts only grow. Ranking ties keep first-encountered order.
    """

    def __init__(self, catalog: LifecycleCatalog) -> None:
        self.catalog = catalog
        self._lock = threading.Lock()
        self._stats: Dict[LifecycleKind, Dict[str, CoverageStat]] = {}
        for kind in LifecycleKind:
            self._stats[kind] = {
                name: CoverageStat(method_name=name, kind=kind)
                for name in catalog.recognized_names(kind)
            }
        self._first_seen: List[Tuple[LifecycleKind, str]] = []
        self._flow_counts: Dict[str, int] = {}

    def fold(self, record: LifecycleMethodRecord) -> None:
        with self._lock:
            stat = self._stats[record.kind].get(record.method_name)
            if stat is None:
                logger.debug("Ignoring record outside catalog %s: %s", self.catalog.version, record.key)
                return
            if stat.usage_count == 0:
                self._first_seen.append((record.kind, record.method_name))
            stat.usage_count += 1
            if record.has_implementation:
                stat.implemented_count += 1
            if record.class_name not in stat.classes:
                stat.classes.append(record.class_name)
            if record.file_path not in stat.files:
                stat.files.append(record.file_path)

    def fold_all(self, records: Iterable[LifecycleMethodRecord]) -> None:
        for record in records:
            self.fold(record)

    def fold_flows(self, flows: Iterable[DataFlowRecord]) -> None:
        with self._lock:
            for flow in flows:
                self._flow_counts[flow.source] = self._flow_counts.get(flow.source, 0) + 1

    def snapshot(self) -> CoverageSnapshot:
        with self._lock:
            coverage = {
                kind: [copy.deepcopy(stat) for stat in stats.values()]
                for kind, stats in self._stats.items()
                if stats
            }
            usage = [
                (kind, name, self._stats[kind][name].usage_count)
                for kind, name in self._first_seen
            ]
            flows = list(self._flow_counts.items())
        # sorted() is stable, so equal counts keep first-encountered order.
        return CoverageSnapshot(
            coverage=coverage,
            ranked_by_usage=sorted(usage, key=lambda item: -item[2]),
            ranked_by_data_flow_count=sorted(flows, key=lambda item: -item[1]),
        )
