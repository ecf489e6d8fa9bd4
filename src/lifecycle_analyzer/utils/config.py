from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any, Dict

import yaml

DEFAULT_SETTINGS: Dict[str, Any] = {
    "analysis": {
        "catalog": "v3-framework",
        "artifacts_dir": "artifacts",
        "skip_test_files": True,
        "workers": 1,
        "max_callgraph_nodes": None,
        "validate_model": True,
        "scope": "lifecycle",
    },
    "observability": {"enabled": True},
    "telemetry": {"enabled": False, "service_name": "lifecycle-analyzer"},
}


def load_settings(path: str | Path | None) -> Dict[str, Any]:
    settings = copy.deepcopy(DEFAULT_SETTINGS)
    if path is not None and Path(path).exists():
        with Path(path).open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"Settings file {path} must contain a mapping")
        for section, values in loaded.items():
            if isinstance(values, dict) and isinstance(settings.get(section), dict):
                settings[section].update(values)
            else:
                settings[section] = values
    catalog = os.environ.get("LIFECYCLE_CATALOG")
    if catalog:
        settings.setdefault("analysis", {})["catalog"] = catalog
    output_dir = os.environ.get("LIFECYCLE_OUTPUT_DIR")
    if output_dir:
        settings.setdefault("analysis", {})["artifacts_dir"] = output_dir
    return settings
