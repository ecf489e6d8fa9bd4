from __future__ import annotations

from lifecycle_analyzer.pipeline.engine import AnalysisResult, LifecycleAnalyzer

__all__ = ["AnalysisResult", "LifecycleAnalyzer"]
