from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from lifecycle_analyzer.analyzers.lifecycle_identifier import LifecycleIdentifier
from lifecycle_analyzer.knowledge.lifecycle_catalog import LifecycleCatalog
from lifecycle_analyzer.models.records import LifecycleMethodRecord
from lifecycle_analyzer.program.entities import ProgramModel
from lifecycle_analyzer.utils.signatures import method_key

SYNTHETIC_ENTRY_NAME = "@dummyMain"
SYNTHETIC_ENTRY_CLASS = "@dummyClass"
SYNTHETIC_ENTRY_FILE = "@dummyFile"


@dataclass(frozen=True)
class SyntheticEntryMethod:
    """Virtual root whose body invokes every implemented lifecycle callback once.

    Never attached to a ClassEntity; call-graph builders treat it like any
    other method through ``signature`` and ``calls``.
    """

    name: str
    class_name: str
    signature: str
    calls: Tuple[str, ...]

    @property
    def key(self) -> str:
        return method_key(self.class_name, self.name)

    @property
    def is_empty(self) -> bool:
        return not self.calls


def entry_method_from_records(records: Iterable[LifecycleMethodRecord]) -> SyntheticEntryMethod:
    calls: List[str] = []
    for record in records:
        if record.has_implementation:
            calls.append(record.signature)
    return SyntheticEntryMethod(
        name=SYNTHETIC_ENTRY_NAME,
        class_name=SYNTHETIC_ENTRY_CLASS,
        signature=f"@{SYNTHETIC_ENTRY_FILE}: {SYNTHETIC_ENTRY_CLASS}.{SYNTHETIC_ENTRY_NAME}()",
        calls=tuple(calls),
    )


def synthesize(
    model: ProgramModel,
    catalog: LifecycleCatalog,
    records: Optional[Iterable[LifecycleMethodRecord]] = None,
    skip_test_files: bool = True,
) -> SyntheticEntryMethod:
    """Build the synthetic entry method; empty-bodied when nothing is recognized."""
    if records is None:
        records = LifecycleIdentifier(model, catalog, skip_test_files=skip_test_files).identify().records
    return entry_method_from_records(records)
