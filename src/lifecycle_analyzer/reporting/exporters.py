"""Downstream encoders for analysis results: data-flow JSON, Markdown, DOT."""
from __future__ import annotations

import re
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from lifecycle_analyzer.analyzers.risk_heuristics import is_invocation, target_label
from lifecycle_analyzer.models.records import DataFlowRecord, LifecycleKind
from lifecycle_analyzer.pipeline.engine import AnalysisResult
from lifecycle_analyzer.reporting.report import call_chain_depth

DOT_MAX_NODES = 50
DOT_MAX_EDGES = 100
DOT_LABEL_LIMIT = 40
MARKDOWN_TOP_METHODS = 20
MARKDOWN_DETAIL_METHODS = 10
MARKDOWN_TOP_TARGETS = 10

_DOT_ID_RE = re.compile(r"[^a-zA-Z0-9_.]")


def group_flows(flows: List[DataFlowRecord]) -> "OrderedDict[str, List[DataFlowRecord]]":
    grouped: "OrderedDict[str, List[DataFlowRecord]]" = OrderedDict()
    for flow in flows:
        grouped.setdefault(flow.source, []).append(flow)
    return grouped


def _ranked_groups(grouped: "OrderedDict[str, List[DataFlowRecord]]") -> List[Tuple[str, List[DataFlowRecord]]]:
    return sorted(grouped.items(), key=lambda item: -len(item[1]))


def dataflow_json(result: AnalysisResult, timestamp: Optional[str] = None) -> Dict[str, Any]:
    grouped = group_flows(result.data_flows)
    return {
        "metadata": {
            "totalFlows": len(result.data_flows),
            "lifecycleMethods": len(result.records),
            "catalogVersion": result.catalog_version,
            "timestamp": timestamp or _now(),
        },
        "dataFlowsByMethod": [
            {
                "method": method,
                "flowCount": len(flows),
                "flows": [
                    {"to": f.target, "variable": f.variable, "line": f.line, "callChain": list(f.call_chain)}
                    for f in flows
                ],
            }
            for method, flows in _ranked_groups(grouped)
        ],
        "allFlows": [flow.to_dict() for flow in result.data_flows],
    }


def dataflow_markdown(result: AnalysisResult, timestamp: Optional[str] = None) -> str:
    flows = result.data_flows
    grouped = group_flows(flows)
    lines: List[str] = [
        "# Lifecycle Data-Flow Report",
        "",
        f"Generated: {timestamp or _now()}",
        "",
        "---",
        "",
        "## Overview",
        "",
        f"- **Total data flows**: {len(flows)}",
        f"- **Lifecycle methods**: {len(result.records)}",
        f"- **Methods with flows**: {len(grouped)}",
        "",
    ]
    if not flows:
        lines.append(f"No data flows extracted (status: {result.data_flow_status}).")
        return "\n".join(lines) + "\n"

    ranked = _ranked_groups(grouped)[:MARKDOWN_TOP_METHODS]
    lines += [
        f"## Top Methods by Data Flow (Top {MARKDOWN_TOP_METHODS})",
        "",
        "| Rank | Method | Data Flows |",
        "|------|--------|------------|",
    ]
    for index, (method, method_flows) in enumerate(ranked, start=1):
        lines.append(f"| {index} | {method} | {len(method_flows)} |")

    lines += ["", "## Data Flow Details", ""]
    for method, method_flows in ranked[:MARKDOWN_DETAIL_METHODS]:
        by_target = group_targets(method_flows)
        lines += [
            f"### {method}",
            "",
            f"**Data flows**: {len(method_flows)}",
            "",
            "| Target | Calls | Example Line |",
            "|--------|-------|--------------|",
        ]
        for target, target_flows in sorted(by_target.items(), key=lambda item: -len(item[1]))[:MARKDOWN_TOP_TARGETS]:
            # First flow in CFG order is the example call site.
            lines.append(f"| {_md_cell(target)} | {len(target_flows)} | {target_flows[0].line} |")
        lines.append("")

    kinds = {record.key: record.kind for record in result.records}
    ability = sum(1 for f in flows if kinds.get(f.source) is LifecycleKind.ABILITY)
    component = sum(1 for f in flows if kinds.get(f.source) is LifecycleKind.COMPONENT)
    depth = call_chain_depth(result)
    lines += [
        "## Data Flow Statistics",
        "",
        "### By Lifecycle Kind",
        "",
        f"- **Ability lifecycle**: {ability} data flows",
        f"- **Component lifecycle**: {component} data flows",
        "",
        "### Average",
        "",
        f"Per lifecycle method: **{len(flows) / len(grouped):.2f}** data flows",
        "",
        "### Call Depth",
        "",
        f"- **Max depth**: {depth['max_depth']}",
        f"- **Average depth**: {depth['avg_depth']:.2f}",
        "",
        "---",
        "",
        f"*Catalog {result.catalog_version}*",
    ]
    return "\n".join(lines) + "\n"


def group_targets(flows: List[DataFlowRecord]) -> "OrderedDict[str, List[DataFlowRecord]]":
    grouped: "OrderedDict[str, List[DataFlowRecord]]" = OrderedDict()
    for flow in flows:
        grouped.setdefault(flow.target, []).append(flow)
    return grouped


def callgraph_dot(result: AnalysisResult) -> str:
    lifecycle_keys = OrderedDict((record.key, record) for record in result.records)
    nodes: "OrderedDict[str, None]" = OrderedDict()
    edges: List[Tuple[str, str]] = []
    for key, record in lifecycle_keys.items():
        nodes[key] = None
        method = record.method
        if method is None or method.cfg is None:
            continue
        for stmt in method.cfg.iter_stmts():
            target = _dot_target(stmt)
            if target is None:
                continue
            nodes[target] = None
            edges.append((key, target))

    out = [
        "digraph CallGraph {",
        "    node [shape=box, style=filled, fillcolor=lightblue];",
        "    rankdir=TB;",
        "    concentrate=true;",
        "",
    ]
    for node in list(nodes)[:DOT_MAX_NODES]:
        color = "lightcoral" if node in lifecycle_keys else "lightblue"
        out.append(f'    "{sanitize_dot_id(node)}" [label="{_dot_label(node)}", fillcolor={color}];')
    out.append("")
    for src, dst in edges[:DOT_MAX_EDGES]:
        out.append(f'    "{sanitize_dot_id(src)}" -> "{sanitize_dot_id(dst)}";')
    out.append("}")
    return "\n".join(out) + "\n"


def sanitize_dot_id(value: str) -> str:
    return _DOT_ID_RE.sub("_", value)


def _dot_label(value: str) -> str:
    if len(value) > DOT_LABEL_LIMIT:
        value = value[: DOT_LABEL_LIMIT - 3] + "..."
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _dot_target(stmt) -> Optional[str]:
    for expr in stmt.exprs:
        if expr.callee:
            return expr.callee
        if is_invocation(expr.text):
            return target_label(expr.text)[0]
    return None


def _md_cell(value: str) -> str:
    return value.replace("|", "\\|").replace("\n", " ")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
