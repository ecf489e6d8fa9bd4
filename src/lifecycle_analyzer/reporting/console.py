from __future__ import annotations

from typing import Any, Dict, List

from lifecycle_analyzer.models.records import SEVERITIES

_RULE = "=" * 60


def render_summary(report: Dict[str, Any]) -> str:
    stats = report.get("stats", {})
    callgraph = report.get("callgraph", {})
    data_flow = report.get("data_flow", {})
    issues = report.get("undefined_issues", {})
    lines: List[str] = [
        _RULE,
        f"Lifecycle analysis ({report.get('catalog_version')})",
        _RULE,
        f"Files:              {stats.get('total_files', 0)}",
        f"Classes:            {stats.get('total_classes', 0)}",
        f"Methods:            {stats.get('total_methods', 0)}",
        f"Ability classes:    {stats.get('ability_classes', 0)}",
        f"Component classes:  {stats.get('component_classes', 0)}",
        f"Lifecycle methods:  {stats.get('lifecycle_methods', 0)}",
        f"Analyzed methods:   {stats.get('analyzed_methods', 0)}",
        "",
        f"Call graph:         {callgraph.get('node_count', 0)} nodes, {callgraph.get('edge_count', 0)} edges"
        f" ({callgraph.get('strategy')})",
    ]
    if callgraph.get("error"):
        lines.append(f"  error: {callgraph['error']}")
    lines.append(f"Data flows:         {data_flow.get('total', 0)} ({data_flow.get('status')})")
    by_severity = issues.get("by_severity", {})
    lines.append(
        f"Undefined risks:    {issues.get('total', 0)} ("
        + ", ".join(f"{sev} {by_severity.get(sev, 0)}" for sev in SEVERITIES)
        + ")"
    )

    sweep = report.get("project_sweep")
    if sweep:
        lines.append(
            f"Project sweep:      {sweep.get('issues_found', 0)} issues in {sweep.get('analyzed_methods', 0)} methods"
        )

    coverage = report.get("coverage", {})
    if coverage:
        lines += ["", "Coverage:"]
        for kind, summary in coverage.items():
            lines.append(
                f"  {kind:<10} {summary['used']}/{summary['defined']} used"
                f" ({summary['coverage_percent']:.1f}%), {summary['usage_count']} implementations"
            )

    recommendations = report.get("recommendations", [])
    if recommendations:
        lines += ["", "Consider implementing:"]
        for item in recommendations:
            lines.append(f"  {item['name']} ({item['kind']}): {item['reason']}")

    if report.get("cancelled"):
        lines += ["", "Run was cancelled; results cover the completed methods only."]
    if report.get("analysis_id"):
        lines += ["", f"Report written for {report['analysis_id']} (run {report.get('run_id')})"]
    lines.append(_RULE)
    return "\n".join(lines) + "\n"
