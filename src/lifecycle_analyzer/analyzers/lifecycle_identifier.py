from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from lifecycle_analyzer.analyzers.role_classifier import RoleClassifier
from lifecycle_analyzer.knowledge.lifecycle_catalog import LifecycleCatalog
from lifecycle_analyzer.models.records import LifecycleMethodRecord, Role
from lifecycle_analyzer.program.entities import ClassEntity, ProgramModel, SourceFile

logger = logging.getLogger(__name__)


@dataclass
class Identification:
    records: List[LifecycleMethodRecord] = field(default_factory=list)
    roles: Dict[str, Role] = field(default_factory=dict)
    total_files: int = 0
    total_classes: int = 0
    total_methods: int = 0
    ability_classes: int = 0
    component_classes: int = 0
    skipped_files: int = 0
    skipped_classes: int = 0


def is_test_file(path: str) -> bool:
    return "test" in path or "Test" in path


class LifecycleIdentifier:
    """Walks the program in file order and emits one record per recognized callback."""

    def __init__(
        self,
        model: ProgramModel,
        catalog: LifecycleCatalog,
        classifier: Optional[RoleClassifier] = None,
        skip_test_files: bool = True,
        workers: int = 1,
    ) -> None:
        self.model = model
        self.catalog = catalog
        self.classifier = classifier or RoleClassifier(model, catalog)
        self.skip_test_files = skip_test_files
        self.workers = max(1, int(workers or 1))

    def identify(self) -> Identification:
        result = Identification()
        files = self.model.list_files()
        result.total_files = len(files)
        candidates = self._candidate_classes(files, result)
        for cls, role in zip(candidates, self._classify_all(candidates)):
            result.total_classes += 1
            result.roles[cls.name] = role
            if role is Role.FRAMEWORK_ENTRY_CONTAINER:
                result.ability_classes += 1
            elif role is Role.UI_COMPONENT:
                result.component_classes += 1
            try:
                records, method_count = self._records_for_class(cls, role)
            except Exception as exc:
                logger.warning("Skipping lifecycle records for %s: %s", cls.name, exc)
                continue
            result.total_methods += method_count
            result.records.extend(records)
        return result

    def _candidate_classes(self, files: List[SourceFile], result: Identification) -> List[ClassEntity]:
        candidates: List[ClassEntity] = []
        for source in files:
            if self.skip_test_files and is_test_file(source.path):
                result.skipped_files += 1
                continue
            for cls in source.classes:
                if self.classifier.is_synthetic(cls):
                    result.skipped_classes += 1
                    continue
                candidates.append(cls)
        return candidates

    def _classify_all(self, classes: List[ClassEntity]) -> List[Role]:
        if self.workers == 1 or len(classes) < 2:
            return [self.classifier.classify(cls) for cls in classes]
        # map() keeps input order, so results match the sequential run.
        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            return list(pool.map(self.classifier.classify, classes))

    def _records_for_class(self, cls: ClassEntity, role: Role) -> Tuple[List[LifecycleMethodRecord], int]:
        methods = self.model.list_methods(cls)
        kinds = self.catalog.kinds_for_role(role) if role is not Role.NONE else []
        records: List[LifecycleMethodRecord] = []
        for method in methods:
            for kind in kinds:
                if not self.catalog.is_recognized(kind, method.name):
                    continue
                cfg = self.model.get_cfg(method)
                records.append(
                    LifecycleMethodRecord(
                        method_name=method.name,
                        kind=kind,
                        class_name=cls.name,
                        file_path=cls.file_path,
                        line=method.line,
                        has_implementation=cfg is not None and not cfg.is_empty,
                        signature=method.signature,
                        method=method,
                    )
                )
                # Partitions sharing a role may overlap; the first kind wins.
                break
        return records, len(methods)
