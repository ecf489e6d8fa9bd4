from __future__ import annotations

import json
import sys

import pytest

from builders import sample_program_dict
from lifecycle_analyzer import main as cli
from lifecycle_analyzer.pipeline.orchestrator import Orchestrator
from lifecycle_analyzer.telemetry import current_run_context
from lifecycle_analyzer.utils.config import load_settings


def _write_model(tmp_path, data=None):
    path = tmp_path / "model.json"
    path.write_text(json.dumps(data or sample_program_dict()), encoding="utf-8")
    return path


def _settings(tmp_path):
    settings = load_settings(None)
    settings["analysis"]["artifacts_dir"] = str(tmp_path / "artifacts")
    return settings


def test_run_writes_run_scoped_artifacts(tmp_path) -> None:
    model_path = _write_model(tmp_path)
    report = Orchestrator(_settings(tmp_path)).run(model_path)
    base = tmp_path / "artifacts" / report["analysis_id"]
    for ref in report["artifacts"].values():
        assert (base / ref).exists()
    saved = json.loads((base / report["artifacts"]["report"]).read_text(encoding="utf-8"))
    assert saved["stats"]["lifecycle_methods"] == 2
    assert saved["undefined_issues"]["by_severity"]["high"] == 1
    assert saved["data_flow"]["total"] == 1
    assert len(report["analysis_id"]) == 16
    context = current_run_context()
    assert (context["analysis_id"], context["run_id"]) == (report["analysis_id"], report["run_id"])
    assert context["catalog_version"] == "v3-framework"
    coverage = json.loads((base / report["artifacts"]["coverage"]).read_text(encoding="utf-8"))
    assert coverage["coverage"]["component"]["summary"]["used"] == 2

    events_path = base / "runs" / report["run_id"] / "observability" / "run.jsonl"
    events = [json.loads(line) for line in events_path.read_text(encoding="utf-8").splitlines()]
    assert events[0]["event_type"] == "run.start"
    assert events[-1] == {**events[-1], "event_type": "run.end", "status": "ok"}
    stages = [e["stage"] for e in events if e["event_type"] == "stage.end"]
    assert stages == ["load", "identify", "callgraph", "scan", "report"]


def test_run_uses_requested_catalog(tmp_path) -> None:
    report = Orchestrator(_settings(tmp_path)).run(_write_model(tmp_path), catalog="v1-minimal")
    assert report["catalog_version"] == "v1-minimal"


def test_invalid_model_logs_run_end_error(tmp_path) -> None:
    model_path = _write_model(tmp_path, {"files": "nope"})
    orchestrator = Orchestrator(_settings(tmp_path))
    with pytest.raises(ValueError):
        orchestrator.run(model_path)
    [events_path] = list((tmp_path / "artifacts").glob("*/runs/*/observability/run.jsonl"))
    last = json.loads(events_path.read_text(encoding="utf-8").splitlines()[-1])
    assert (last["event_type"], last["status"]) == ("run.end", "error")


def test_cli_prints_summary(tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.delenv("LIFECYCLE_CATALOG", raising=False)
    model_path = _write_model(tmp_path)
    monkeypatch.setattr(
        sys,
        "argv",
        [
            "lifecycle-analyzer",
            "--model",
            str(model_path),
            "--settings",
            str(tmp_path / "missing.yaml"),
            "--out",
            str(tmp_path / "out"),
            "--catalog",
            "v2-framework",
            "--workers",
            "2",
        ],
    )
    cli.main()
    out = capsys.readouterr().out
    assert "Lifecycle analysis (v2-framework)" in out
    assert "Report written for" in out
    assert list((tmp_path / "out").glob("*/runs/*/graphs/callgraph.dot"))


def test_project_scope_writes_sweep_artifact(tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.delenv("LIFECYCLE_CATALOG", raising=False)
    model_path = _write_model(tmp_path)
    monkeypatch.setattr(
        sys,
        "argv",
        [
            "lifecycle-analyzer",
            "--model",
            str(model_path),
            "--settings",
            str(tmp_path / "missing.yaml"),
            "--out",
            str(tmp_path / "out"),
            "--scope",
            "project",
        ],
    )
    cli.main()
    assert "Project sweep:      1 issues in 2 methods" in capsys.readouterr().out
    [sweep_path] = list((tmp_path / "out").glob("*/runs/*/report/project_sweep.json"))
    sweep = json.loads(sweep_path.read_text(encoding="utf-8"))
    assert sweep["issues_found"] == 1
    assert sweep["issues"][0]["method_name"] == "aboutToAppear"
    [report_path] = list((tmp_path / "out").glob("*/runs/*/report/report.json"))
    report = json.loads(report_path.read_text(encoding="utf-8"))
    assert report["scope"] == "project"
    assert report["project_sweep"]["analyzed_methods"] == 2
    [events_path] = list((tmp_path / "out").glob("*/runs/*/observability/run.jsonl"))
    stages = [
        json.loads(line)["stage"]
        for line in events_path.read_text(encoding="utf-8").splitlines()
        if json.loads(line)["event_type"] == "stage.end"
    ]
    assert stages == ["load", "identify", "callgraph", "scan", "project_sweep", "report"]


def test_lifecycle_scope_has_no_sweep(tmp_path) -> None:
    report = Orchestrator(_settings(tmp_path)).run(_write_model(tmp_path))
    assert report["scope"] == "lifecycle"
    assert report["project_sweep"] is None
    assert "project_sweep" not in report["artifacts"]
