from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from lifecycle_analyzer.utils.artifact_store import ArtifactStore


class EventLogger:
    """Append-only JSONL event log for one analysis run."""

    def __init__(
        self,
        store: Optional[ArtifactStore] = None,
        run_id: Optional[str] = None,
        enabled: bool = True,
    ) -> None:
        self.store = store
        self.enabled = enabled and store is not None
        self.run_id = run_id
        self._lock = threading.Lock()
        self.path = self._resolve_path() if self.enabled else None

    def _resolve_path(self) -> Optional[Path]:
        if self.store is None:
            return None
        path = self.store.path("observability", "run.jsonl")
        path.parent.mkdir(parents=True, exist_ok=True)
        return path

    def log(self, event_type: str, **fields: Any) -> None:
        if not self.enabled or self.path is None:
            return
        event: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "event_type": event_type,
            "analysis_id": self.store.analysis_id if self.store else None,
        }
        if self.run_id:
            event["run_id"] = self.run_id
        event.update(fields)
        line = json.dumps(event, ensure_ascii=True, default=str)
        with self._lock:
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(line)
                handle.write("\n")

    def stage_start(self, stage: str, **fields: Any) -> None:
        self.log("stage.start", stage=stage, **fields)

    def stage_end(self, stage: str, status: str = "ok", **fields: Any) -> None:
        self.log("stage.end", stage=stage, status=status, **fields)


class NullEventLogger(EventLogger):
    def __init__(self) -> None:
        super().__init__(store=None, enabled=False)
