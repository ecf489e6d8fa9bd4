from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from lifecycle_analyzer.utils.signatures import method_key

if TYPE_CHECKING:
    from lifecycle_analyzer.program.entities import MethodEntity


class Role(str, Enum):
    NONE = "none"
    FRAMEWORK_ENTRY_CONTAINER = "framework_entry_container"
    UI_COMPONENT = "ui_component"


class LifecycleKind(str, Enum):
    ABILITY = "ability"
    COMPONENT = "component"
    CALLBACK = "callback"


# Catalog partition -> role that owns it.
KIND_ROLES: Dict[LifecycleKind, Role] = {
    LifecycleKind.ABILITY: Role.FRAMEWORK_ENTRY_CONTAINER,
    LifecycleKind.COMPONENT: Role.UI_COMPONENT,
    LifecycleKind.CALLBACK: Role.UI_COMPONENT,
}

SEVERITIES: Tuple[str, ...] = ("high", "medium", "low")


@dataclass(frozen=True)
class LifecycleMethodRecord:
    method_name: str
    kind: LifecycleKind
    class_name: str
    file_path: str
    line: int
    has_implementation: bool
    signature: str
    method: Optional["MethodEntity"] = field(default=None, compare=False, repr=False)

    @property
    def key(self) -> str:
        return method_key(self.class_name, self.method_name)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "methodName": self.method_name,
            "kind": self.kind.value,
            "className": self.class_name,
            "filePath": self.file_path,
            "line": self.line,
            "hasImplementation": self.has_implementation,
            "signature": self.signature,
        }


@dataclass(frozen=True)
class DataFlowRecord:
    source: str
    target: str
    line: int
    call_chain: Tuple[str, ...]
    variable: str = "data"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.source,
            "to": self.target,
            "variable": self.variable,
            "line": self.line,
            "callChain": list(self.call_chain),
        }


@dataclass(frozen=True)
class UndefinedRiskIssue:
    method: str
    class_name: str
    line: int
    description: str
    severity: str
    confidence: str = "normal"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ProjectUndefinedIssue:
    """One pattern hit from the whole-project sweep; a statement may yield several."""

    file_path: str
    class_name: str
    method_name: str
    line: int
    variable: str
    description: str
    severity: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CoverageStat:
    """Per catalog entry usage. ``is_used`` is derived so it cannot drift from the count."""

    method_name: str
    kind: LifecycleKind
    usage_count: int = 0
    implemented_count: int = 0
    classes: List[str] = field(default_factory=list)
    files: List[str] = field(default_factory=list)

    @property
    def is_used(self) -> bool:
        return self.usage_count > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "methodName": self.method_name,
            "kind": self.kind.value,
            "isDefined": True,
            "isUsed": self.is_used,
            "usageCount": self.usage_count,
            "implementedCount": self.implemented_count,
            "classes": list(self.classes),
            "files": list(self.files),
        }


@dataclass
class AnalysisStats:
    total_files: int = 0
    total_classes: int = 0
    total_methods: int = 0
    ability_classes: int = 0
    component_classes: int = 0
    lifecycle_methods: int = 0
    analyzed_methods: int = 0
    call_graph_nodes: int = 0
    call_graph_edges: int = 0
    data_flow_paths: int = 0
    undefined_issues: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)
