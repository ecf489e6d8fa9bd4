from __future__ import annotations

from typing import Iterable, Optional

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

ABILITY_FILE = "entry/src/main/ets/entryability/EntryAbility.ets"
INDEX_FILE = "entry/src/main/ets/pages/Index.ets"
HELPER_FILE = "entry/src/main/ets/common/Helper.ets"
TEST_FILE = "entry/src/ohosTest/ets/test/Ability.test.ets"


def stmt(text: str, line: int = 0, invoke: bool = False) -> Stmt:
    exprs = (Expr(text),) if invoke else ()
    return Stmt(text=text, line=line, exprs=exprs)


def cfg(*stmts: Stmt) -> Cfg:
    return Cfg(blocks=(BasicBlock(0, tuple(stmts)),))


def method(name: str, class_name: str, file_path: str, body: Optional[Cfg] = None, line: int = 1) -> MethodEntity:
    return MethodEntity(name=name, class_name=class_name, file_path=file_path, line=line, cfg=body)


def klass(
    name: str,
    file_path: str,
    superclass: str = "",
    decorators: Iterable[str] = (),
    methods: Iterable[MethodEntity] = (),
) -> ClassEntity:
    return ClassEntity(
        name=name,
        file_path=file_path,
        superclass_name=superclass,
        decorators=tuple(decorators),
        methods=list(methods),
    )


def program(*files: SourceFile) -> InMemoryProgramModel:
    return InMemoryProgramModel(files)


def sample_program() -> InMemoryProgramModel:
    """Ability + @Entry page + plain helper + test-only ability + synthetic default class."""
    ability = klass(
        "EntryAbility",
        ABILITY_FILE,
        superclass="UIAbility",
        methods=[
            method(
                "onCreate",
                "EntryAbility",
                ABILITY_FILE,
                cfg(
                    stmt(f"instanceinvoke this.<@{ABILITY_FILE}: EntryAbility.init()>()", 10, invoke=True),
                    stmt("%0 = undefined", 11),
                ),
                line=9,
            ),
            method(
                "onWindowStageCreate",
                "EntryAbility",
                ABILITY_FILE,
                cfg(
                    stmt(
                        "instanceinvoke windowStage.<@ohos/window: WindowStage.loadContent(string)>('pages/Index')",
                        20,
                        invoke=True,
                    ),
                ),
                line=19,
            ),
            method("onDestroy", "EntryAbility", ABILITY_FILE, None, line=30),
            method("init", "EntryAbility", ABILITY_FILE, cfg(stmt("return", 41)), line=40),
        ],
    )
    default_class = klass(
        "%dflt",
        INDEX_FILE,
        methods=[method("onCreate", "%dflt", INDEX_FILE, cfg(stmt("return", 1)))],
    )
    index = klass(
        "Index",
        INDEX_FILE,
        decorators=("Entry", "Component"),
        methods=[
            method(
                "aboutToAppear",
                "Index",
                INDEX_FILE,
                cfg(
                    stmt("%0 = null", 12),
                    stmt("staticinvoke <@%unk/%unk: .pop()>()", 13, invoke=True),
                ),
                line=11,
            ),
            method("build", "Index", INDEX_FILE, cfg(stmt("return", 21)), line=20),
            method(
                "onClick",
                "Index",
                INDEX_FILE,
                cfg(stmt(f"instanceinvoke this.<@{INDEX_FILE}: Index.aboutToAppear()>()", 31, invoke=True)),
                line=30,
            ),
        ],
    )
    helper = klass(
        "Helper",
        HELPER_FILE,
        methods=[method("onCreate", "Helper", HELPER_FILE, cfg(stmt("staticinvoke <@%unk/%unk: .log()>()", 5, invoke=True)))],
    )
    test_ability = klass(
        "TestAbility",
        TEST_FILE,
        superclass="UIAbility",
        methods=[method("onCreate", "TestAbility", TEST_FILE, cfg(stmt("%0 = undefined", 3)))],
    )
    return program(
        SourceFile(ABILITY_FILE, [ability]),
        SourceFile(INDEX_FILE, [default_class, index]),
        SourceFile(HELPER_FILE, [helper]),
        SourceFile(TEST_FILE, [test_ability]),
    )


def sample_program_dict() -> dict:
    return {
        "version": "1",
        "project": "demo",
        "files": [
            {
                "path": INDEX_FILE,
                "classes": [
                    {
                        "name": "Dialog",
                        "superclass": "CustomComponent",
                        "decorators": [],
                        "methods": [
                            {
                                "name": "aboutToAppear",
                                "line": 4,
                                "cfg": {
                                    "blocks": [
                                        {
                                            "id": 0,
                                            "stmts": [
                                                {"text": "%0 = undefined", "line": 5},
                                                {
                                                    "text": "staticinvoke <@%unk/%unk: .pop()>()",
                                                    "line": 6,
                                                    "exprs": [{"text": "staticinvoke <@%unk/%unk: .pop()>()"}],
                                                },
                                                {"text": "return", "line": 7},
                                            ],
                                        }
                                    ]
                                },
                            },
                            {"name": "aboutToDisappear", "line": 9, "cfg": None},
                        ],
                    }
                ],
            }
        ],
    }
