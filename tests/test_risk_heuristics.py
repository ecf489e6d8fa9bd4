from __future__ import annotations

from lifecycle_analyzer.analyzers.risk_heuristics import (
    TARGET_LABEL_LIMIT,
    assess_risk,
    extract_invoke_target,
    is_invocation,
    project_patterns,
    target_label,
)


def test_undefined_outranks_null() -> None:
    match = assess_risk("%0 = undefined == null")
    assert match.severity == "high"
    assert match.description.startswith("Possible undefined variable access: ")


def test_null_is_medium() -> None:
    assert assess_risk("if %1 == null goto label").severity == "medium"


def test_optional_field_load_is_low() -> None:
    assert assess_risk("%2 = fieldload %1.title?").severity == "low"
    assert assess_risk("%2 = fieldload %1.title") is None


def test_weak_signals_only_when_enabled() -> None:
    assert assess_risk("%3 = %arr[%i]") is None
    array = assess_risk("%3 = %arr[%i]", weak_signals=True)
    assert (array.severity, array.confidence) == ("low", "weak")
    chained = assess_risk("%4 = user?.name", weak_signals=True)
    assert (chained.severity, chained.confidence) == ("low", "weak")
    assert assess_risk("return", weak_signals=True) is None


def test_description_truncates_statement() -> None:
    text = "%0 = undefined " + "x" * 100
    assert assess_risk(text).description == "Possible undefined variable access: " + text[:TARGET_LABEL_LIMIT]


def test_invocation_markers() -> None:
    assert is_invocation("staticinvoke <@%unk/%unk: .pop()>()")
    assert is_invocation("ptrcall %fp()")
    assert not is_invocation("%0 = undefined")


def test_strict_pattern_keeps_receiver() -> None:
    text = "instanceinvoke this.<@entry/src/main/ets/pages/Index.ets: Index.refresh(number)>(%1)"
    assert extract_invoke_target(text) == "this.refresh"


def test_loose_pattern_takes_first_call() -> None:
    assert extract_invoke_target("staticinvoke <@%unk/%unk: .pop()>()") == "pop"


def test_label_falls_back_to_text_prefix() -> None:
    text = "call " + "y" * 80
    label, name = target_label(text)
    assert name is None
    assert label == text[:TARGET_LABEL_LIMIT]
    assert len(label) == TARGET_LABEL_LIMIT


def test_project_patterns_report_each_pattern_separately() -> None:
    hits = project_patterns("%2 = fieldload %0.<@a.ets: Store.items> undefined null arrayload")
    assert [(h.variable, h.severity) for h in hits] == [
        ("value", "high"),
        ("field", "medium"),
        ("array element", "low"),
    ]


def test_project_patterns_need_fieldload_for_null() -> None:
    assert project_patterns("%0 = null") == []
    assert project_patterns("%1 = %0?.name") == []
