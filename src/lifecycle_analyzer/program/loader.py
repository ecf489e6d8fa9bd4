from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from lifecycle_analyzer.program.entities import (
    BasicBlock,
    Cfg,
    ClassEntity,
    Expr,
    InMemoryProgramModel,
    MethodEntity,
    SourceFile,
    Stmt,
)
from lifecycle_analyzer.utils.json_schema import validate_json


def load_program_model(path: str | Path, validate: bool = True) -> InMemoryProgramModel:
    path = Path(path)
    with path.open("r", encoding="utf-8") as handle:
        data = json.load(handle)
    return program_model_from_dict(data, validate=validate)


def program_model_digest(path: str | Path) -> str:
    hasher = hashlib.sha256()
    with Path(path).open("rb") as handle:
        for chunk in iter(lambda: handle.read(1024 * 1024), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


def program_model_from_dict(data: Dict[str, Any], validate: bool = True) -> InMemoryProgramModel:
    if validate:
        validate_json(data, "ProgramModel")
    files = [_parse_file(raw) for raw in data.get("files", []) or []]
    return InMemoryProgramModel(files)


def _parse_file(raw: Dict[str, Any]) -> SourceFile:
    path = str(raw.get("path", ""))
    classes = [_parse_class(item, path) for item in raw.get("classes", []) or []]
    return SourceFile(path=path, classes=classes)


def _parse_class(raw: Dict[str, Any], file_path: str) -> ClassEntity:
    name = str(raw.get("name", ""))
    methods = [_parse_method(item, name, file_path) for item in raw.get("methods", []) or []]
    return ClassEntity(
        name=name,
        file_path=file_path,
        superclass_name=str(raw.get("superclass") or ""),
        decorators=tuple(str(d) for d in raw.get("decorators", []) or []),
        methods=methods,
    )


def _parse_method(raw: Dict[str, Any], class_name: str, file_path: str) -> MethodEntity:
    return MethodEntity(
        name=str(raw.get("name", "")),
        class_name=class_name,
        signature=str(raw.get("signature") or ""),
        file_path=file_path,
        line=int(raw.get("line", 0) or 0),
        col=int(raw.get("col", 0) or 0),
        cfg=_parse_cfg(raw.get("cfg")),
    )


def _parse_cfg(raw: Optional[Dict[str, Any]]) -> Optional[Cfg]:
    if raw is None:
        return None
    blocks: List[BasicBlock] = []
    for index, block in enumerate(raw.get("blocks", []) or []):
        stmts = tuple(_parse_stmt(stmt) for stmt in block.get("stmts", []) or [])
        blocks.append(BasicBlock(block_id=int(block.get("id", index)), stmts=stmts))
    return Cfg(blocks=tuple(blocks))


def _parse_stmt(raw: Dict[str, Any]) -> Stmt:
    exprs = tuple(
        Expr(text=str(expr.get("text", "")), callee=expr.get("callee") or None)
        for expr in raw.get("exprs", []) or []
    )
    return Stmt(
        text=str(raw.get("text", "")),
        line=int(raw.get("line", 0) or 0),
        col=int(raw.get("col", 0) or 0),
        exprs=exprs,
    )
