from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from jsonschema import Draft202012Validator

SCHEMA_DIR = Path(__file__).resolve().parent.parent / "schemas"


@lru_cache(maxsize=None)
def _load_schema(schema_path: str) -> Dict[str, Any]:
    with Path(schema_path).open("r", encoding="utf-8") as handle:
        return json.load(handle)


def schema_path(name: str) -> Path:
    return SCHEMA_DIR / f"{name}.schema.json"


def validate_json(data: Any, schema: str | Path) -> None:
    """Validate ``data`` against a bundled schema name or an explicit schema file."""
    path = Path(schema)
    if not path.suffix:
        path = schema_path(str(schema))
    validator = Draft202012Validator(_load_schema(str(path)))
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    if errors:
        messages = []
        for err in errors:
            loc = ".".join([str(p) for p in err.path]) or "<root>"
            messages.append(f"{loc}: {err.message}")
        raise ValueError(f"Schema validation failed for {path.name}: " + "; ".join(messages))
