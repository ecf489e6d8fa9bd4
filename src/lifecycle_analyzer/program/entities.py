"""Read-only program model consumed by the lifecycle engine.

The upstream front-end (compiler/loader) produces classes, methods and
control-flow graphs. This module only holds them and answers lookups;
it never rewrites them.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Protocol, Tuple

from lifecycle_analyzer.utils.signatures import method_key


@dataclass(frozen=True)
class Expr:
    """One expression of a statement, rendered to text by the front-end.

    ``callee`` is the resolved method signature when the front-end knows it
    (invocation expressions only).
    """

    text: str
    callee: Optional[str] = None

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class Stmt:
    text: str
    line: int = 0
    col: int = 0
    exprs: Tuple[Expr, ...] = ()

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class BasicBlock:
    block_id: int
    stmts: Tuple[Stmt, ...] = ()


@dataclass(frozen=True)
class Cfg:
    blocks: Tuple[BasicBlock, ...] = ()

    @property
    def is_empty(self) -> bool:
        # Zero blocks means "unimplemented", not "empty body".
        return not self.blocks

    def iter_stmts(self) -> Iterator[Stmt]:
        for block in self.blocks:
            yield from block.stmts

    def first_stmt(self) -> Optional[Stmt]:
        if self.blocks and self.blocks[0].stmts:
            return self.blocks[0].stmts[0]
        return None


@dataclass
class MethodEntity:
    name: str
    class_name: str
    signature: str = ""
    file_path: str = ""
    line: int = 0
    col: int = 0
    cfg: Optional[Cfg] = None

    def __post_init__(self) -> None:
        if not self.signature:
            self.signature = f"@{self.file_path}: {self.class_name}.{self.name}()"

    @property
    def key(self) -> str:
        return method_key(self.class_name, self.name)

    @property
    def has_implementation(self) -> bool:
        return self.cfg is not None and not self.cfg.is_empty


@dataclass
class ClassEntity:
    name: str
    file_path: str = ""
    superclass_name: str = ""
    decorators: Tuple[str, ...] = ()
    methods: List[MethodEntity] = field(default_factory=list)


@dataclass
class SourceFile:
    path: str
    classes: List[ClassEntity] = field(default_factory=list)


class ProgramModel(Protocol):
    def list_files(self) -> List[SourceFile]: ...

    def list_classes(self) -> List[ClassEntity]: ...

    def list_methods(self, cls: ClassEntity) -> List[MethodEntity]: ...

    def get_cfg(self, method: MethodEntity) -> Optional[Cfg]: ...

    def get_superclass(self, cls: ClassEntity) -> Optional[ClassEntity]: ...

    def has_capability_marker(self, cls: ClassEntity, name: str) -> bool: ...

    def find_method(self, signature: str) -> Optional[MethodEntity]: ...

    def methods_named(self, name: str) -> List[MethodEntity]: ...


class InMemoryProgramModel:
    """Program model backed by plain lists, indexed on construction."""

    def __init__(self, files: Iterable[SourceFile]) -> None:
        self.files: List[SourceFile] = list(files)
        self._classes_by_name: Dict[str, ClassEntity] = {}
        self._methods_by_sig: Dict[str, MethodEntity] = {}
        self._methods_by_name: Dict[str, List[MethodEntity]] = {}
        for source in self.files:
            for cls in source.classes:
                if not cls.file_path:
                    cls.file_path = source.path
                # First declaration wins on duplicate class names.
                self._classes_by_name.setdefault(cls.name, cls)
                for method in cls.methods:
                    self._methods_by_sig.setdefault(method.signature, method)
                    self._methods_by_name.setdefault(method.name, []).append(method)

    def list_files(self) -> List[SourceFile]:
        return list(self.files)

    def list_classes(self) -> List[ClassEntity]:
        return [cls for source in self.files for cls in source.classes]

    def list_methods(self, cls: ClassEntity) -> List[MethodEntity]:
        return list(cls.methods)

    def get_cfg(self, method: MethodEntity) -> Optional[Cfg]:
        return method.cfg

    def get_superclass(self, cls: ClassEntity) -> Optional[ClassEntity]:
        if not cls.superclass_name:
            return None
        return self._classes_by_name.get(cls.superclass_name)

    def has_capability_marker(self, cls: ClassEntity, name: str) -> bool:
        return name in cls.decorators

    def find_method(self, signature: str) -> Optional[MethodEntity]:
        return self._methods_by_sig.get(signature)

    def methods_named(self, name: str) -> List[MethodEntity]:
        return list(self._methods_by_name.get(name, []))
