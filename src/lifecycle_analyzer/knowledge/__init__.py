from __future__ import annotations

from lifecycle_analyzer.knowledge.lifecycle_catalog import LifecycleCatalog, Recommendation

__all__ = ["LifecycleCatalog", "Recommendation"]
