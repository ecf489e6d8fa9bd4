from __future__ import annotations

from lifecycle_analyzer.models.records import (
    KIND_ROLES,
    AnalysisStats,
    CoverageStat,
    DataFlowRecord,
    LifecycleKind,
    LifecycleMethodRecord,
    Role,
    UndefinedRiskIssue,
)

__all__ = [
    "KIND_ROLES",
    "AnalysisStats",
    "CoverageStat",
    "DataFlowRecord",
    "LifecycleKind",
    "LifecycleMethodRecord",
    "Role",
    "UndefinedRiskIssue",
]
