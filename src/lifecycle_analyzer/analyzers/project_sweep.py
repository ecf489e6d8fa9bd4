from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from lifecycle_analyzer.analyzers.lifecycle_identifier import is_test_file
from lifecycle_analyzer.analyzers.risk_heuristics import project_patterns
from lifecycle_analyzer.models.records import ProjectUndefinedIssue
from lifecycle_analyzer.program.entities import ClassEntity, MethodEntity, ProgramModel
from lifecycle_analyzer.tools.undefined_solver import NoopUndefinedSolver, UndefinedValueSolver

logger = logging.getLogger(__name__)

CONSTRUCTOR_NAME = "constructor"
INTERNAL_PREFIX = "__"


@dataclass
class ProjectSweep:
    issues: List[ProjectUndefinedIssue] = field(default_factory=list)
    total_files: int = 0
    total_classes: int = 0
    total_methods: int = 0
    analyzed_methods: int = 0
    skipped_files: int = 0
    solver_errors: int = 0
    cancelled: bool = False

    @property
    def issues_found(self) -> int:
        return len(self.issues)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_files": self.total_files,
            "total_classes": self.total_classes,
            "total_methods": self.total_methods,
            "analyzed_methods": self.analyzed_methods,
            "issues_found": self.issues_found,
            "skipped_files": self.skipped_files,
            "solver_errors": self.solver_errors,
            "cancelled": self.cancelled,
            "issues": [issue.to_dict() for issue in self.issues],
        }


def is_sweepable(method: MethodEntity) -> bool:
    return method.name != CONSTRUCTOR_NAME and not method.name.startswith(INTERNAL_PREFIX)


class ProjectUndefinedScanner:
    """Checks every method of every source file for undefined-value patterns.

    Unlike the lifecycle scan this ignores class roles, and each pattern in a
    statement is reported separately.
    """

    def __init__(
        self,
        model: ProgramModel,
        solver: Optional[UndefinedValueSolver] = None,
        skip_test_files: bool = True,
    ) -> None:
        self.model = model
        self.solver = solver or NoopUndefinedSolver()
        self.skip_test_files = skip_test_files

    def sweep(self, cancel_event: Optional[threading.Event] = None) -> ProjectSweep:
        result = ProjectSweep()
        files = self.model.list_files()
        result.total_files = len(files)
        for source in files:
            if self.skip_test_files and is_test_file(source.path):
                result.skipped_files += 1
                continue
            for cls in source.classes:
                if cancel_event is not None and cancel_event.is_set():
                    result.cancelled = True
                    return result
                self._sweep_class(cls, source.path, result)
        return result

    def _sweep_class(self, cls: ClassEntity, file_path: str, result: ProjectSweep) -> None:
        methods = self.model.list_methods(cls)
        result.total_classes += 1
        result.total_methods += len(methods)
        for method in methods:
            if not is_sweepable(method):
                continue
            result.analyzed_methods += 1
            cfg = self.model.get_cfg(method)
            if cfg is None or cfg.is_empty:
                continue
            first = cfg.first_stmt()
            if first is not None:
                try:
                    self.solver.analyze(cfg, first, method)
                except Exception as exc:
                    logger.debug("Undefined-value solver failed for %s: %s", method.key, exc)
                    result.solver_errors += 1
            for stmt in cfg.iter_stmts():
                for hit in project_patterns(stmt.text):
                    result.issues.append(
                        ProjectUndefinedIssue(
                            file_path=file_path,
                            class_name=cls.name,
                            method_name=method.name,
                            line=stmt.line,
                            variable=hit.variable,
                            description=hit.description,
                            severity=hit.severity,
                        )
                    )
