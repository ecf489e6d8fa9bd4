from __future__ import annotations

from collections import Counter
from typing import Any, Dict, List, Optional

from lifecycle_analyzer.knowledge.lifecycle_catalog import LifecycleCatalog
from lifecycle_analyzer.models.records import SEVERITIES, LifecycleKind
from lifecycle_analyzer.pipeline.engine import AnalysisResult

TOP_DATA_FLOW_METHODS = 10


def build_report(result: AnalysisResult, catalog: Optional[LifecycleCatalog] = None) -> Dict[str, Any]:
    snapshot = result.snapshot
    coverage: Dict[str, Any] = {}
    for kind in LifecycleKind:
        if kind not in snapshot.coverage:
            continue
        coverage[kind.value] = {
            **snapshot.summary(kind),
            "used_methods": [
                {
                    "name": stat.method_name,
                    "usage_count": stat.usage_count,
                    "implemented_count": stat.implemented_count,
                    "classes": list(stat.classes),
                }
                for stat in sorted(snapshot.used(kind), key=lambda s: -s.usage_count)
            ],
            "unused_methods": snapshot.unused(kind),
        }
    return {
        "catalog_version": result.catalog_version,
        "catalog": catalog.describe() if catalog is not None else None,
        "scope": result.scope,
        "stats": result.stats.to_dict(),
        "callgraph": result.callgraph.to_dict(),
        "synthetic_entry": {
            "signature": result.entry.signature,
            "call_count": len(result.entry.calls),
        },
        "coverage": coverage,
        "ranked_by_usage": [
            {"kind": kind.value, "method": name, "usage_count": count}
            for kind, name, count in snapshot.ranked_by_usage
        ],
        "recommendations": recommendations(result, catalog),
        "data_flow": {
            "status": result.data_flow_status,
            "total": len(result.data_flows),
            "top_methods": [
                {"method": method, "count": count}
                for method, count in snapshot.ranked_by_data_flow_count[:TOP_DATA_FLOW_METHODS]
            ],
            **call_chain_depth(result),
        },
        "undefined_issues": {
            "total": len(result.undefined_issues),
            "by_severity": severity_counts(result),
            "items": [issue.to_dict() for issue in result.undefined_issues],
        },
        "project_sweep": result.project_sweep.to_dict() if result.project_sweep is not None else None,
        "lifecycle_methods": [record.to_dict() for record in result.records],
        "cancelled": result.cancelled,
        "errors": list(result.errors),
    }


def recommendations(result: AnalysisResult, catalog: Optional[LifecycleCatalog]) -> List[Dict[str, str]]:
    if catalog is None:
        return []
    out: List[Dict[str, str]] = []
    for item in catalog.recommendations:
        if item.kind not in result.snapshot.coverage:
            continue
        try:
            stat = result.snapshot.stat(item.kind, item.method_name)
        except KeyError:
            continue
        if not stat.is_used:
            out.append({"name": item.method_name, "kind": item.kind.value, "reason": item.reason})
    return out


def severity_counts(result: AnalysisResult) -> Dict[str, int]:
    counts = Counter(issue.severity for issue in result.undefined_issues)
    return {severity: counts.get(severity, 0) for severity in SEVERITIES}


def call_chain_depth(result: AnalysisResult) -> Dict[str, Any]:
    if not result.data_flows:
        return {"max_depth": 0, "avg_depth": 0.0}
    depths = [len(flow.call_chain) for flow in result.data_flows]
    return {"max_depth": max(depths), "avg_depth": round(sum(depths) / len(depths), 2)}
