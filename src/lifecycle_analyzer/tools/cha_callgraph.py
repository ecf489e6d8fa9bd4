"""Class-hierarchy call-graph builder over the in-memory program model.

Stands in for the front-end's own CHA builder: calls with a resolved callee
signature go to that method; unresolved calls go to every method with the
same name (the usual CHA over-approximation when receiver types are unknown).
"""
from __future__ import annotations

import re
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Iterable, List, Optional, Protocol, Sequence, Set, Tuple

from lifecycle_analyzer.program.entities import ProgramModel
from lifecycle_analyzer.telemetry import span
from lifecycle_analyzer.utils.signatures import embedded_signature, method_name_from_signature

_CALL_NAME_RE = re.compile(r"\.?(\w+)\([^()]*\)")


@dataclass
class CallGraph:
    nodes: List[str] = field(default_factory=list)
    # Duplicate (caller, callee) pairs are kept: one edge per call site.
    edges: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def node_count(self) -> int:
        return len(self.nodes)

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    def callees(self, caller: str) -> List[str]:
        return [callee for src, callee in self.edges if src == caller]

    def to_dict(self) -> Dict[str, object]:
        return {
            "nodes": list(self.nodes),
            "edges": [{"caller": caller, "callee": callee} for caller, callee in self.edges],
        }


class SyntheticMethod(Protocol):
    signature: str
    calls: Tuple[str, ...]


class CallGraphBackend(Protocol):
    def has_method(self, signature: str) -> bool: ...

    def build_from_entry_points(self, entry_points: Sequence[str]) -> CallGraph: ...


class ClassHierarchyCallGraphBuilder:
    def __init__(
        self,
        model: ProgramModel,
        synthetic_methods: Iterable[SyntheticMethod] = (),
        max_nodes: Optional[int] = None,
    ) -> None:
        self.model = model
        self.synthetic: Dict[str, SyntheticMethod] = {m.signature: m for m in synthetic_methods}
        self.max_nodes = max_nodes

    def has_method(self, signature: str) -> bool:
        return signature in self.synthetic or self.model.find_method(signature) is not None

    def build_from_entry_points(self, entry_points: Sequence[str]) -> CallGraph:
        graph = CallGraph()
        seen: Set[str] = set()
        queue: Deque[str] = deque()
        for entry in entry_points:
            if entry not in seen:
                seen.add(entry)
                graph.nodes.append(entry)
                queue.append(entry)
        with span("tool.cha_callgraph", entry_count=len(graph.nodes)):
            while queue:
                caller = queue.popleft()
                for callee in self._callees_of(caller):
                    if callee in seen:
                        graph.edges.append((caller, callee))
                        continue
                    if self.max_nodes is not None and len(graph.nodes) >= self.max_nodes:
                        continue
                    graph.edges.append((caller, callee))
                    seen.add(callee)
                    graph.nodes.append(callee)
                    queue.append(callee)
        return graph

    def _callees_of(self, signature: str) -> List[str]:
        synthetic = self.synthetic.get(signature)
        if synthetic is not None:
            return list(synthetic.calls)
        method = self.model.find_method(signature)
        if method is None:
            # Library or unresolved method: a leaf.
            return []
        cfg = self.model.get_cfg(method)
        if cfg is None:
            return []
        out: List[str] = []
        for stmt in cfg.iter_stmts():
            for expr in stmt.exprs:
                out.extend(self._resolve(expr.callee, expr.text))
        return out

    def _resolve(self, callee: Optional[str], text: str) -> List[str]:
        target = callee or embedded_signature(text)
        if target:
            if self.model.find_method(target) is not None:
                return [target]
            name = method_name_from_signature(target)
        else:
            if "invoke" not in text:
                return []
            match = _CALL_NAME_RE.search(text)
            if not match:
                return []
            name = match.group(1)
        candidates = self.model.methods_named(name)
        if candidates:
            return [m.signature for m in candidates]
        return [target] if target else []