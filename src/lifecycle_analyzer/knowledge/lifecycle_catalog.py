from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import yaml

from lifecycle_analyzer.data.harmony_lifecycle import (
    CATALOG_TABLES,
    COMPONENT_BASES,
    DEFAULT_CATALOG_VERSION,
    SYNTHETIC_CLASS_PATTERNS,
)
from lifecycle_analyzer.models.records import KIND_ROLES, LifecycleKind, Role


@dataclass(frozen=True)
class Recommendation:
    method_name: str
    kind: LifecycleKind
    reason: str


class LifecycleCatalog:
    """Recognized callback names partitioned by kind, plus classification inputs.

    Instances are read-only once built; analyzers receive one by injection so
    different catalog versions can be compared over the same program.
    """

    def __init__(
        self,
        version: str,
        methods: Mapping[LifecycleKind, Iterable[str]],
        ability_bases: Iterable[str] = (),
        component_bases: Iterable[str] = COMPONENT_BASES,
        component_markers: Iterable[str] = ("Component",),
        entry_markers: Iterable[str] = (),
        synthetic_class_patterns: Iterable[str] = SYNTHETIC_CLASS_PATTERNS,
        weak_risk_signals: bool = False,
        recommendations: Iterable[Recommendation] = (),
    ) -> None:
        self.version = version
        # Tuples keep the declared order for coverage tables; sets answer membership.
        self._ordered: Dict[LifecycleKind, Tuple[str, ...]] = {}
        self._members: Dict[LifecycleKind, frozenset[str]] = {}
        for kind in LifecycleKind:
            names = tuple(dict.fromkeys(methods.get(kind, ()) or ()))
            self._ordered[kind] = names
            self._members[kind] = frozenset(names)
        self.ability_bases = frozenset(ability_bases)
        self.component_bases = frozenset(component_bases)
        self.component_markers = tuple(component_markers)
        self.entry_markers = tuple(entry_markers)
        self.synthetic_class_patterns = tuple(synthetic_class_patterns)
        self.weak_risk_signals = weak_risk_signals
        self.recommendations = tuple(recommendations)

    @staticmethod
    def builtin(version: str = DEFAULT_CATALOG_VERSION) -> "LifecycleCatalog":
        table = CATALOG_TABLES.get(version)
        if table is None:
            known = ", ".join(sorted(CATALOG_TABLES))
            raise ValueError(f"Unknown lifecycle catalog version {version!r} (known: {known})")
        return _catalog_from_table(version, table)

    @staticmethod
    def load(path: str | Path) -> "LifecycleCatalog":
        path = Path(path)
        with path.open("r", encoding="utf-8") as handle:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(handle) or {}
            else:
                data = json.load(handle)
        version = data.get("version")
        if not version:
            raise ValueError("Lifecycle catalog missing version")
        raw_methods = data.get("methods")
        if not isinstance(raw_methods, dict) or not any(raw_methods.values()):
            raise ValueError("Lifecycle catalog missing methods")
        table: Dict[str, Any] = dict(data.get("classification", {}) or {})
        for kind in LifecycleKind:
            table[kind.value] = tuple(raw_methods.get(kind.value, []) or [])
        table["weak_risk_signals"] = bool(data.get("weak_risk_signals", False))
        table["recommendations"] = tuple(
            (item.get("name"), item.get("kind"), item.get("reason", ""))
            for item in data.get("recommendations", []) or []
            if isinstance(item, dict)
        )
        return _catalog_from_table(str(version), table)

    @staticmethod
    def resolve(name_or_path: Optional[str]) -> "LifecycleCatalog":
        """Accept a built-in version name or a path to a catalog file."""
        if not name_or_path:
            return LifecycleCatalog.builtin()
        if name_or_path in CATALOG_TABLES:
            return LifecycleCatalog.builtin(name_or_path)
        return LifecycleCatalog.load(name_or_path)

    def recognized_names(self, kind: LifecycleKind) -> Tuple[str, ...]:
        return self._ordered[kind]

    def is_recognized(self, kind: LifecycleKind, name: str) -> bool:
        return name in self._members[kind]

    def kinds_for_role(self, role: Role) -> List[LifecycleKind]:
        return [kind for kind in LifecycleKind if KIND_ROLES[kind] is role and self._ordered[kind]]

    def role_recognizes(self, role: Role, name: str) -> bool:
        return any(name in self._members[kind] for kind in self.kinds_for_role(role))

    def size(self, kind: LifecycleKind) -> int:
        return len(self._ordered[kind])

    def describe(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "sizes": {kind.value: self.size(kind) for kind in LifecycleKind},
        }


def _catalog_from_table(version: str, table: Mapping[str, Any]) -> LifecycleCatalog:
    recommendations = []
    for name, kind, reason in table.get("recommendations", ()) or ():
        try:
            recommendations.append(Recommendation(str(name), LifecycleKind(kind), str(reason)))
        except ValueError as exc:
            raise ValueError(f"Catalog {version} has invalid recommendation kind {kind!r}") from exc
    return LifecycleCatalog(
        version=version,
        methods={kind: table.get(kind.value, ()) for kind in LifecycleKind},
        ability_bases=table.get("ability_bases", ()) or (),
        component_bases=table.get("component_bases", COMPONENT_BASES) or (),
        component_markers=table.get("component_markers", ("Component",)) or (),
        entry_markers=table.get("entry_markers", ()) or (),
        synthetic_class_patterns=table.get("synthetic_class_patterns", SYNTHETIC_CLASS_PATTERNS) or (),
        weak_risk_signals=bool(table.get("weak_risk_signals", False)),
        recommendations=recommendations,
    )
