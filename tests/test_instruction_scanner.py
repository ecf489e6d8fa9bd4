from __future__ import annotations

from builders import INDEX_FILE, cfg, klass, method, program, stmt
from lifecycle_analyzer.analyzers.instruction_scanner import InstructionScanner
from lifecycle_analyzer.analyzers.lifecycle_identifier import LifecycleIdentifier
from lifecycle_analyzer.analyzers.role_classifier import RoleClassifier
from lifecycle_analyzer.knowledge.lifecycle_catalog import LifecycleCatalog
from lifecycle_analyzer.models.records import LifecycleKind, Role
from lifecycle_analyzer.program.entities import SourceFile, Stmt, Expr


def _dialog_program(*stmts):
    dialog = klass(
        "Dialog",
        INDEX_FILE,
        superclass="CustomComponent",
        methods=[method("aboutToAppear", "Dialog", INDEX_FILE, cfg(*stmts), line=4)],
    )
    return program(SourceFile(INDEX_FILE, [dialog])), dialog


def test_dialog_about_to_appear_scenario() -> None:
    model, dialog = _dialog_program(
        stmt("%0 = undefined", 5),
        stmt("staticinvoke <@%unk/%unk: .pop()>()", 6, invoke=True),
        stmt("return", 7),
    )
    catalog = LifecycleCatalog.builtin()
    assert RoleClassifier(model, catalog).classify(dialog) is Role.UI_COMPONENT
    records = LifecycleIdentifier(model, catalog).identify().records
    assert [(r.key, r.kind) for r in records] == [("Dialog.aboutToAppear", LifecycleKind.COMPONENT)]

    result = InstructionScanner(model).scan(records[0])
    assert result.analyzed
    assert [(i.severity, i.line) for i in result.issues] == [("high", 5)]
    assert len(result.edges) == 1
    edge = result.edges[0]
    assert edge.target == "pop"
    assert edge.source == "Dialog.aboutToAppear"
    assert edge.line == 6
    assert edge.call_chain == ("Dialog.aboutToAppear", "pop")
    assert edge.variable == "data"


def test_one_edge_per_invoking_statement() -> None:
    compound = Stmt(
        text="%1 = instanceinvoke %0.<@x.ets: Api.first()>(staticinvoke <@x.ets: Api.second()>())",
        line=3,
        exprs=(
            Expr("instanceinvoke %0.<@x.ets: Api.first()>(...)"),
            Expr("staticinvoke <@x.ets: Api.second()>()"),
        ),
    )
    model, _ = _dialog_program(
        compound,
        stmt("callMethod(%2)", 4),
        stmt("%3 = 1", 5),
    )
    record = LifecycleIdentifier(model, LifecycleCatalog.builtin()).identify().records[0]
    result = InstructionScanner(model).scan(record)
    assert [e.line for e in result.edges] == [3, 4]
    assert result.edges[0].target == "%0.first"
    assert result.edges[1].target == "callMethod"


def test_chain_prefix_and_unknown_name() -> None:
    model, _ = _dialog_program(stmt("call " + "z" * 70, 2))
    record = LifecycleIdentifier(model, LifecycleCatalog.builtin()).identify().records[0]
    edge = InstructionScanner(model, chain_prefix=("@dummyClass.@dummyMain",)).scan(record).edges[0]
    assert edge.target == ("call " + "z" * 70)[:60]
    assert edge.call_chain == ("@dummyClass.@dummyMain", "Dialog.aboutToAppear", "unknown")


def test_edges_can_be_disabled_while_risks_still_scan() -> None:
    model, _ = _dialog_program(stmt("%0 = null", 1), stmt("staticinvoke <@%unk/%unk: .pop()>()", 2, invoke=True))
    record = LifecycleIdentifier(model, LifecycleCatalog.builtin()).identify().records[0]
    result = InstructionScanner(model).scan(record, extract_edges=False)
    assert result.edges == []
    assert [i.severity for i in result.issues] == ["medium"]


class _FailingSolver:
    def __init__(self) -> None:
        self.calls = 0

    def analyze(self, cfg, entry_stmt, method=None):
        self.calls += 1
        raise RuntimeError("solver diverged")


def test_solver_failure_is_swallowed() -> None:
    model, _ = _dialog_program(stmt("%0 = undefined", 1))
    record = LifecycleIdentifier(model, LifecycleCatalog.builtin()).identify().records[0]
    solver = _FailingSolver()
    result = InstructionScanner(model, solver=solver).scan(record)
    assert solver.calls == 1
    assert result.solver_error == "solver diverged"
    assert [i.severity for i in result.issues] == ["high"]


def test_absent_cfg_yields_nothing() -> None:
    dialog = klass(
        "Dialog",
        INDEX_FILE,
        superclass="CustomComponent",
        methods=[method("aboutToAppear", "Dialog", INDEX_FILE, None)],
    )
    model = program(SourceFile(INDEX_FILE, [dialog]))
    record = LifecycleIdentifier(model, LifecycleCatalog.builtin()).identify().records[0]
    solver = _FailingSolver()
    result = InstructionScanner(model, solver=solver).scan(record)
    assert not result.analyzed
    assert result.edges == [] and result.issues == []
    assert solver.calls == 0


def test_weak_signals_follow_flag() -> None:
    model, _ = _dialog_program(stmt("%1 = %arr[0]", 1))
    record = LifecycleIdentifier(model, LifecycleCatalog.builtin()).identify().records[0]
    assert InstructionScanner(model).scan(record).issues == []
    issues = InstructionScanner(model, weak_signals=True).scan(record).issues
    assert [(i.severity, i.confidence) for i in issues] == [("low", "weak")]
