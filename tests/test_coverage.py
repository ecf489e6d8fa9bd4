from __future__ import annotations

from lifecycle_analyzer.analyzers.coverage import CoverageTracker
from lifecycle_analyzer.knowledge.lifecycle_catalog import LifecycleCatalog
from lifecycle_analyzer.models.records import DataFlowRecord, LifecycleKind, LifecycleMethodRecord


def _record(name, kind=LifecycleKind.ABILITY, cls="EntryAbility", path="a.ets", implemented=True):
    return LifecycleMethodRecord(
        method_name=name,
        kind=kind,
        class_name=cls,
        file_path=path,
        line=1,
        has_implementation=implemented,
        signature=f"@{path}: {cls}.{name}()",
    )


def test_every_catalog_entry_has_a_stat() -> None:
    catalog = LifecycleCatalog.builtin("v3-framework")
    snapshot = CoverageTracker(catalog).snapshot()
    assert len(snapshot.coverage[LifecycleKind.ABILITY]) == 26
    assert len(snapshot.coverage[LifecycleKind.COMPONENT]) == 17
    assert len(snapshot.coverage[LifecycleKind.CALLBACK]) == 16
    assert snapshot.summary(LifecycleKind.ABILITY)["coverage_percent"] == 0.0
    assert LifecycleKind.CALLBACK not in CoverageTracker(LifecycleCatalog.builtin("v2-framework")).snapshot().coverage


def test_used_flag_matches_count_and_classes() -> None:
    tracker = CoverageTracker(LifecycleCatalog.builtin())
    tracker.fold_all(
        [
            _record("onCreate"),
            _record("onCreate", cls="SecondAbility", path="b.ets"),
            _record("onDestroy", implemented=False),
            _record("aboutToAppear", kind=LifecycleKind.COMPONENT, cls="Index"),
        ]
    )
    snapshot = tracker.snapshot()
    for stats in snapshot.coverage.values():
        for stat in stats:
            assert stat.is_used == (stat.usage_count > 0) == bool(stat.classes)
    on_create = snapshot.stat(LifecycleKind.ABILITY, "onCreate")
    assert on_create.usage_count == 2
    assert on_create.classes == ["EntryAbility", "SecondAbility"]
    assert on_create.files == ["a.ets", "b.ets"]
    on_destroy = snapshot.stat(LifecycleKind.ABILITY, "onDestroy")
    assert (on_destroy.usage_count, on_destroy.implemented_count) == (1, 0)
    assert "onCreate" not in snapshot.unused(LifecycleKind.ABILITY)
    assert "onBackground" in snapshot.unused(LifecycleKind.ABILITY)


def test_records_outside_catalog_are_ignored() -> None:
    tracker = CoverageTracker(LifecycleCatalog.builtin("v1-minimal"))
    tracker.fold(_record("onShare"))
    assert tracker.snapshot().ranked_by_usage == []


def test_ranking_ties_keep_first_seen_order() -> None:
    tracker = CoverageTracker(LifecycleCatalog.builtin())
    tracker.fold_all(
        [
            _record("onForeground"),
            _record("onCreate"),
            _record("aboutToAppear", kind=LifecycleKind.COMPONENT, cls="Index"),
            _record("aboutToAppear", kind=LifecycleKind.COMPONENT, cls="Dialog"),
        ]
    )
    tracker.fold_flows(
        [
            DataFlowRecord("EntryAbility.onCreate", "a", 1, ()),
            DataFlowRecord("Index.aboutToAppear", "b", 2, ()),
            DataFlowRecord("Index.aboutToAppear", "c", 3, ()),
            DataFlowRecord("Dialog.aboutToAppear", "d", 4, ()),
        ]
    )
    snapshot = tracker.snapshot()
    assert snapshot.ranked_by_usage == [
        (LifecycleKind.COMPONENT, "aboutToAppear", 2),
        (LifecycleKind.ABILITY, "onForeground", 1),
        (LifecycleKind.ABILITY, "onCreate", 1),
    ]
    assert snapshot.ranked_by_data_flow_count == [
        ("Index.aboutToAppear", 2),
        ("EntryAbility.onCreate", 1),
        ("Dialog.aboutToAppear", 1),
    ]


def test_snapshot_is_detached_from_tracker() -> None:
    tracker = CoverageTracker(LifecycleCatalog.builtin())
    tracker.fold(_record("onCreate"))
    first = tracker.snapshot()
    tracker.fold(_record("onCreate", cls="Other"))
    assert first.stat(LifecycleKind.ABILITY, "onCreate").usage_count == 1
    assert tracker.snapshot().stat(LifecycleKind.ABILITY, "onCreate").usage_count == 2
