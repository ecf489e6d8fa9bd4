from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from lifecycle_analyzer.program.loader import program_model_digest


class ArtifactStore:
    """Run-scoped output directory: ``<base>/<analysis_id>/runs/<run_id>/...``."""

    def __init__(self, base_dir: str | Path, analysis_id: str, run_id: str | None = None) -> None:
        self.base_dir = Path(base_dir)
        self.analysis_id = analysis_id
        self.run_id = run_id
        self.base_root = self.base_dir / analysis_id
        self.root = self.base_root / "runs" / run_id if run_id else self.base_root

    @staticmethod
    def compute_analysis_id(model_path: str | Path | None, project: str | None = None) -> str:
        if model_path:
            return program_model_digest(model_path)[:16]
        if project:
            return project
        raise ValueError("model_path or project is required")

    def ensure_dir(self, *parts: str) -> Path:
        path = self.root.joinpath(*parts)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def path(self, *parts: str) -> Path:
        return self.root.joinpath(*parts)

    def relpath(self, rel_path: str) -> str:
        if self.run_id:
            return str(Path("runs") / self.run_id / rel_path)
        return rel_path

    def write_json(self, rel_path: str, data: Any) -> Path:
        path = self.path(rel_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2, ensure_ascii=False)
        return path

    def write_text(self, rel_path: str, text: str) -> Path:
        path = self.path(rel_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    def read_json(self, rel_path: str) -> Any:
        path = self.path(rel_path)
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
