from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Dict, Optional

from lifecycle_analyzer.knowledge.lifecycle_catalog import LifecycleCatalog
from lifecycle_analyzer.observability.logger import EventLogger
from lifecycle_analyzer.pipeline.engine import AnalysisResult, LifecycleAnalyzer
from lifecycle_analyzer.program.loader import load_program_model
from lifecycle_analyzer.reporting.exporters import callgraph_dot, dataflow_json, dataflow_markdown
from lifecycle_analyzer.reporting.report import build_report
from lifecycle_analyzer.telemetry import set_run_context, span
from lifecycle_analyzer.utils.artifact_store import ArtifactStore

logger = logging.getLogger(__name__)


class Orchestrator:
    """Settings-driven run: load the export, analyze it, write run-scoped artifacts."""

    def __init__(self, settings: Dict[str, Any]) -> None:
        self.settings = settings
        self.last_result: Optional[AnalysisResult] = None

    def run(
        self,
        model_path: str | Path,
        catalog: Optional[str] = None,
        out_dir: Optional[str | Path] = None,
        workers: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Dict[str, Any]:
        analysis_conf = self.settings.get("analysis", {})
        catalog_ref = catalog or analysis_conf.get("catalog")
        lifecycle_catalog = LifecycleCatalog.resolve(catalog_ref)
        analysis_id = ArtifactStore.compute_analysis_id(model_path)
        run_id = set_run_context(analysis_id, catalog_version=lifecycle_catalog.version)
        store = ArtifactStore(out_dir or analysis_conf.get("artifacts_dir", "artifacts"), analysis_id, run_id=run_id)
        for part in ("report", "dataflow", "graphs"):
            store.ensure_dir(part)
        obs_conf = self.settings.get("observability", {})
        event_logger = EventLogger(store, run_id=run_id, enabled=obs_conf.get("enabled", True))
        event_logger.log("run.start", model_path=str(model_path), catalog_version=lifecycle_catalog.version)
        success = False
        try:
            with span("run", model_path=str(model_path)):
                event_logger.stage_start("load")
                with span("stage.load", stage="load"):
                    model = load_program_model(model_path, validate=analysis_conf.get("validate_model", True))
                event_logger.stage_end(
                    "load",
                    files=len(model.list_files()),
                    catalog_version=lifecycle_catalog.version,
                )

                analyzer = LifecycleAnalyzer(
                    model,
                    catalog=lifecycle_catalog,
                    event_logger=event_logger,
                    skip_test_files=analysis_conf.get("skip_test_files", True),
                    workers=workers or analysis_conf.get("workers", 1),
                    max_callgraph_nodes=analysis_conf.get("max_callgraph_nodes"),
                    scope=analysis_conf.get("scope", "lifecycle"),
                )
                result = analyzer.run(cancel_event=cancel_event)
                self.last_result = result

                event_logger.stage_start("report")
                with span("stage.report", stage="report"):
                    report = build_report(result, lifecycle_catalog)
                    report["analysis_id"] = analysis_id
                    report["run_id"] = run_id
                    report["model_path"] = str(model_path)
                    report["artifacts"] = {
                        "report": store.relpath("report/report.json"),
                        "dataflow_json": store.relpath("dataflow/dataflow.json"),
                        "dataflow_md": store.relpath("dataflow/dataflow.md"),
                        "callgraph_dot": store.relpath("graphs/callgraph.dot"),
                        "coverage": store.relpath("report/coverage.json"),
                    }
                    if result.callgraph.graph is not None:
                        report["artifacts"]["callgraph_json"] = store.relpath("graphs/callgraph.json")
                        store.write_json("graphs/callgraph.json", result.callgraph.graph.to_dict())
                    if result.project_sweep is not None:
                        report["artifacts"]["project_sweep"] = store.relpath("report/project_sweep.json")
                        store.write_json("report/project_sweep.json", result.project_sweep.to_dict())
                    store.write_json("report/report.json", report)
                    store.write_json("dataflow/dataflow.json", dataflow_json(result))
                    store.write_text("dataflow/dataflow.md", dataflow_markdown(result))
                    store.write_text("graphs/callgraph.dot", callgraph_dot(result))
                    store.write_json("report/coverage.json", result.snapshot.to_dict())
                event_logger.stage_end("report", ref=store.relpath("report/report.json"))
                logger.info("Wrote lifecycle report for %s to %s", analysis_id, store.root)

                success = True
                return report
        except Exception as exc:
            event_logger.log("run.end", status="error", error=str(exc))
            raise
        finally:
            if success:
                event_logger.log("run.end", status="cancelled" if result.cancelled else "ok")
