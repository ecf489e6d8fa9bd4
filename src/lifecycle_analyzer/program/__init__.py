from __future__ import annotations

from lifecycle_analyzer.program.entities import (
    BasicBlock,
    Cfg,
    ClassEntity,
    Expr,
    InMemoryProgramModel,
    MethodEntity,
    ProgramModel,
    SourceFile,
    Stmt,
)
from lifecycle_analyzer.program.loader import (
    load_program_model,
    program_model_digest,
    program_model_from_dict,
)

__all__ = [
    "BasicBlock",
    "Cfg",
    "ClassEntity",
    "Expr",
    "InMemoryProgramModel",
    "MethodEntity",
    "ProgramModel",
    "SourceFile",
    "Stmt",
    "load_program_model",
    "program_model_digest",
    "program_model_from_dict",
]
