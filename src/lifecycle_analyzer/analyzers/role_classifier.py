from __future__ import annotations

import logging
from typing import Iterable, Set

from lifecycle_analyzer.knowledge.lifecycle_catalog import LifecycleCatalog
from lifecycle_analyzer.models.records import Role
from lifecycle_analyzer.program.entities import ClassEntity, ProgramModel

logger = logging.getLogger(__name__)


class RoleClassifier:
    """Structural classification of classes into framework roles.

    Entry containers win over UI components when a class matches both.
    """

    def __init__(self, model: ProgramModel, catalog: LifecycleCatalog) -> None:
        self.model = model
        self.catalog = catalog

    def is_synthetic(self, cls: ClassEntity) -> bool:
        return any(pattern in cls.name for pattern in self.catalog.synthetic_class_patterns)

    def classify(self, cls: ClassEntity) -> Role:
        try:
            if self.is_synthetic(cls):
                return Role.NONE
            if self.is_entry_container(cls):
                return Role.FRAMEWORK_ENTRY_CONTAINER
            if self.is_ui_component(cls):
                return Role.UI_COMPONENT
        except Exception as exc:
            # Classification is total: a broken class is simply unclassified.
            logger.warning("Classification failed for %s: %s", cls.name, exc)
        return Role.NONE

    def is_entry_container(self, cls: ClassEntity) -> bool:
        bases = self.catalog.ability_bases
        if cls.superclass_name in bases:
            return True
        return any(ancestor.superclass_name in bases for ancestor in self._ancestors(cls))

    def is_ui_component(self, cls: ClassEntity) -> bool:
        if cls.superclass_name in self.catalog.component_bases:
            return True
        markers = self.catalog.component_markers + self.catalog.entry_markers
        return any(self.model.has_capability_marker(cls, marker) for marker in markers)

    def _ancestors(self, cls: ClassEntity) -> Iterable[ClassEntity]:
        # Superclass links may be cyclic or dangling in malformed input.
        visited: Set[str] = {cls.name}
        current = self.model.get_superclass(cls)
        while current is not None and current.name not in visited:
            visited.add(current.name)
            yield current
            current = self.model.get_superclass(current)
