"""Auxiliary undefined-value solver hook.

The formal fixed-point solver lives outside this package. The scanner only
calls ``analyze`` for its side effects and tolerates any exception it raises.
"""
from __future__ import annotations

from typing import Optional, Protocol

from lifecycle_analyzer.program.entities import Cfg, MethodEntity, Stmt


class UndefinedValueSolver(Protocol):
    def analyze(self, cfg: Cfg, entry_stmt: Stmt, method: Optional[MethodEntity] = None) -> None: ...


class NoopUndefinedSolver:
    def analyze(self, cfg: Cfg, entry_stmt: Stmt, method: Optional[MethodEntity] = None) -> None:
        return None
