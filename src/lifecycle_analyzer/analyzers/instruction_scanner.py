from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from lifecycle_analyzer.analyzers.risk_heuristics import assess_risk, is_invocation, target_label
from lifecycle_analyzer.models.records import DataFlowRecord, LifecycleMethodRecord, UndefinedRiskIssue
from lifecycle_analyzer.program.entities import ProgramModel, Stmt
from lifecycle_analyzer.tools.undefined_solver import NoopUndefinedSolver, UndefinedValueSolver

logger = logging.getLogger(__name__)


@dataclass
class ScanResult:
    edges: List[DataFlowRecord] = field(default_factory=list)
    issues: List[UndefinedRiskIssue] = field(default_factory=list)
    analyzed: bool = False
    solver_error: Optional[str] = None


class InstructionScanner:
    """Mines invocation edges and undefined-value risk signals from one method's CFG.

    Statements are visited block by block in CFG order, so the first edge for a
    target is always the earliest call site.
    """

    def __init__(
        self,
        model: ProgramModel,
        solver: Optional[UndefinedValueSolver] = None,
        weak_signals: bool = False,
        chain_prefix: Sequence[str] = (),
    ) -> None:
        self.model = model
        self.solver = solver or NoopUndefinedSolver()
        self.weak_signals = weak_signals
        self.chain_prefix: Tuple[str, ...] = tuple(chain_prefix)

    def scan(self, record: LifecycleMethodRecord, extract_edges: bool = True) -> ScanResult:
        result = ScanResult()
        method = record.method
        cfg = self.model.get_cfg(method) if method is not None else None
        if cfg is None or cfg.is_empty:
            return result
        result.analyzed = True
        first = cfg.first_stmt()
        if first is not None:
            try:
                self.solver.analyze(cfg, first, method)
            except Exception as exc:
                # Auxiliary signal only; the pattern scan below still runs.
                logger.debug("Undefined-value solver failed for %s: %s", record.key, exc)
                result.solver_error = str(exc)
        for stmt in cfg.iter_stmts():
            if extract_edges:
                edge = self._edge_for(record, stmt)
                if edge is not None:
                    result.edges.append(edge)
            issue = self._issue_for(record, stmt)
            if issue is not None:
                result.issues.append(issue)
        return result

    def _edge_for(self, record: LifecycleMethodRecord, stmt: Stmt) -> Optional[DataFlowRecord]:
        text = next((expr.text for expr in stmt.exprs if is_invocation(expr.text)), None)
        if text is None:
            if not is_invocation(stmt.text):
                return None
            text = stmt.text
        label, name = target_label(text)
        return DataFlowRecord(
            source=record.key,
            target=label,
            line=stmt.line,
            call_chain=self.chain_prefix + (record.key, name or "unknown"),
        )

    def _issue_for(self, record: LifecycleMethodRecord, stmt: Stmt) -> Optional[UndefinedRiskIssue]:
        match = assess_risk(stmt.text, weak_signals=self.weak_signals)
        if match is None:
            return None
        return UndefinedRiskIssue(
            method=record.key,
            class_name=record.class_name,
            line=stmt.line,
            description=match.description,
            severity=match.severity,
            confidence=match.confidence,
        )
