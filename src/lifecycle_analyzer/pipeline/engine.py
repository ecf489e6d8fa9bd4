from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from lifecycle_analyzer.analyzers.callgraph_builder import (
    STRATEGY_SYNTHETIC,
    CallGraphSummary,
    LifecycleCallGraphBuilder,
)
from lifecycle_analyzer.analyzers.coverage import CoverageSnapshot, CoverageTracker
from lifecycle_analyzer.analyzers.entry_synthesizer import SyntheticEntryMethod, entry_method_from_records
from lifecycle_analyzer.analyzers.instruction_scanner import InstructionScanner, ScanResult
from lifecycle_analyzer.analyzers.lifecycle_identifier import LifecycleIdentifier
from lifecycle_analyzer.analyzers.project_sweep import ProjectSweep, ProjectUndefinedScanner
from lifecycle_analyzer.analyzers.role_classifier import RoleClassifier
from lifecycle_analyzer.knowledge.lifecycle_catalog import LifecycleCatalog
from lifecycle_analyzer.models.records import (
    AnalysisStats,
    DataFlowRecord,
    LifecycleMethodRecord,
    Role,
    UndefinedRiskIssue,
)
from lifecycle_analyzer.observability.logger import EventLogger, NullEventLogger
from lifecycle_analyzer.program.entities import ProgramModel
from lifecycle_analyzer.telemetry import span
from lifecycle_analyzer.tools.cha_callgraph import CallGraphBackend, ClassHierarchyCallGraphBuilder
from lifecycle_analyzer.tools.undefined_solver import UndefinedValueSolver

logger = logging.getLogger(__name__)

SCOPE_LIFECYCLE = "lifecycle"
SCOPE_PROJECT = "project"
SCOPES = (SCOPE_LIFECYCLE, SCOPE_PROJECT)


@dataclass
class AnalysisResult:
    catalog_version: str
    stats: AnalysisStats
    records: List[LifecycleMethodRecord]
    roles: Dict[str, Role]
    entry: SyntheticEntryMethod
    callgraph: CallGraphSummary
    data_flows: List[DataFlowRecord]
    undefined_issues: List[UndefinedRiskIssue]
    snapshot: CoverageSnapshot
    data_flow_status: str = "ok"
    cancelled: bool = False
    errors: List[Dict[str, Any]] = field(default_factory=list)
    scope: str = SCOPE_LIFECYCLE
    project_sweep: Optional[ProjectSweep] = None


class LifecycleAnalyzer:
    """Runs identification, entry synthesis, call-graph construction and the per-method sweep."""

    def __init__(
        self,
        model: ProgramModel,
        catalog: Optional[LifecycleCatalog] = None,
        callgraph_backend: Optional[CallGraphBackend] = None,
        solver: Optional[UndefinedValueSolver] = None,
        event_logger: Optional[EventLogger] = None,
        skip_test_files: bool = True,
        workers: int = 1,
        max_callgraph_nodes: Optional[int] = None,
        scope: str = SCOPE_LIFECYCLE,
    ) -> None:
        if scope not in SCOPES:
            raise ValueError(f"Unknown analysis scope: {scope!r} (expected one of {', '.join(SCOPES)})")
        self.model = model
        self.catalog = catalog or LifecycleCatalog.builtin()
        self.callgraph_backend = callgraph_backend
        self.solver = solver
        self.event_logger = event_logger or NullEventLogger()
        self.skip_test_files = skip_test_files
        self.workers = max(1, int(workers or 1))
        self.max_callgraph_nodes = max_callgraph_nodes
        self.scope = scope

    def run(self, cancel_event: Optional[threading.Event] = None) -> AnalysisResult:
        events = self.event_logger
        stats = AnalysisStats()
        tracker = CoverageTracker(self.catalog)

        events.stage_start("identify", catalog_version=self.catalog.version)
        with span("stage.identify", stage="identify"):
            identifier = LifecycleIdentifier(
                self.model,
                self.catalog,
                classifier=RoleClassifier(self.model, self.catalog),
                skip_test_files=self.skip_test_files,
                workers=self.workers,
            )
            identification = identifier.identify()
            tracker.fold_all(identification.records)
        stats.total_files = identification.total_files
        stats.total_classes = identification.total_classes
        stats.total_methods = identification.total_methods
        stats.ability_classes = identification.ability_classes
        stats.component_classes = identification.component_classes
        stats.lifecycle_methods = len(identification.records)
        events.stage_end(
            "identify",
            total_classes=stats.total_classes,
            lifecycle_methods=stats.lifecycle_methods,
            skipped_files=identification.skipped_files,
            skipped_classes=identification.skipped_classes,
        )

        entry = entry_method_from_records(identification.records)
        events.log("entry.synthesized", signature=entry.signature, call_count=len(entry.calls))

        events.stage_start("callgraph")
        backend = self.callgraph_backend or ClassHierarchyCallGraphBuilder(
            self.model,
            synthetic_methods=[entry],
            max_nodes=self.max_callgraph_nodes,
        )
        callgraph = LifecycleCallGraphBuilder(backend).build(entry, identification.records)
        stats.call_graph_nodes = callgraph.node_count
        stats.call_graph_edges = callgraph.edge_count
        events.stage_end("callgraph", status="error" if callgraph.error else "ok", **callgraph.to_dict())

        errors: List[Dict[str, Any]] = []
        if callgraph.error:
            errors.append({"stage": "callgraph", "error": callgraph.error})
        extract_edges = callgraph.available
        events.stage_start("scan", extract_edges=extract_edges)
        with span("stage.scan", stage="scan", workers=self.workers):
            scanner = InstructionScanner(
                self.model,
                solver=self.solver,
                weak_signals=self.catalog.weak_risk_signals,
                chain_prefix=(entry.key,) if callgraph.strategy == STRATEGY_SYNTHETIC else (),
            )
            results, cancelled = self._scan_all(scanner, identification.records, extract_edges, cancel_event, errors)
        data_flows: List[DataFlowRecord] = []
        issues: List[UndefinedRiskIssue] = []
        for result in results:
            if result.analyzed:
                stats.analyzed_methods += 1
            data_flows.extend(result.edges)
            issues.extend(result.issues)
        tracker.fold_flows(data_flows)
        stats.data_flow_paths = len(data_flows)
        stats.undefined_issues = len(issues)
        events.stage_end(
            "scan",
            status="cancelled" if cancelled else "ok",
            analyzed_methods=stats.analyzed_methods,
            data_flow_paths=stats.data_flow_paths,
            undefined_issues=stats.undefined_issues,
        )

        project_sweep = None
        if self.scope == SCOPE_PROJECT and not cancelled:
            project_sweep = self._sweep_project(cancel_event)
            cancelled = project_sweep.cancelled

        return AnalysisResult(
            catalog_version=self.catalog.version,
            stats=stats,
            records=identification.records,
            roles=identification.roles,
            entry=entry,
            callgraph=callgraph,
            data_flows=data_flows,
            undefined_issues=issues,
            snapshot=tracker.snapshot(),
            data_flow_status="ok" if extract_edges else "skipped",
            cancelled=cancelled,
            errors=errors,
            scope=self.scope,
            project_sweep=project_sweep,
        )

    def _scan_all(
        self,
        scanner: InstructionScanner,
        records: List[LifecycleMethodRecord],
        extract_edges: bool,
        cancel_event: Optional[threading.Event],
        errors: List[Dict[str, Any]],
    ) -> tuple[List[ScanResult], bool]:
        lock = threading.Lock()

        def scan_one(record: LifecycleMethodRecord) -> Optional[ScanResult]:
            if cancel_event is not None and cancel_event.is_set():
                return None
            if not record.has_implementation:
                return ScanResult()
            try:
                return scanner.scan(record, extract_edges=extract_edges)
            except Exception as exc:
                logger.warning("Scan failed for %s: %s", record.key, exc)
                with lock:
                    errors.append({"stage": "scan", "method": record.key, "error": str(exc)})
                return ScanResult()

        if self.workers == 1 or len(records) < 2:
            raw: List[Optional[ScanResult]] = []
            for record in records:
                outcome = scan_one(record)
                if outcome is None:
                    break
                raw.append(outcome)
        else:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                raw = list(pool.map(scan_one, records))
        # Keep the completed prefix so a cancelled run stays in record order.
        results: List[ScanResult] = []
        for outcome in raw:
            if outcome is None:
                break
            results.append(outcome)
        cancelled = len(results) < len(records)
        return results, cancelled

    def _sweep_project(self, cancel_event: Optional[threading.Event]) -> ProjectSweep:
        events = self.event_logger
        events.stage_start("project_sweep", skip_test_files=self.skip_test_files)
        with span("stage.project_sweep", stage="project_sweep"):
            scanner = ProjectUndefinedScanner(self.model, solver=self.solver, skip_test_files=self.skip_test_files)
            sweep = scanner.sweep(cancel_event=cancel_event)
        events.stage_end(
            "project_sweep",
            status="cancelled" if sweep.cancelled else "ok",
            analyzed_methods=sweep.analyzed_methods,
            issues_found=sweep.issues_found,
        )
        return sweep
