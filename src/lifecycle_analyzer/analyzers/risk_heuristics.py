"""Textual heuristics over rendered IR statements.

Unsound by construction: these match substrings of the front-end's text
rendering, so unusual formatting produces false positives and negatives.
Kept separate from the scanner so a structured instruction-kind check can
replace it without changing the scanner's contract.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

INVOCATION_MARKERS: Tuple[str, ...] = ("invoke", "call")
UNDEFINED_TOKEN = "undefined"
NULL_TOKEN = "null"
FIELD_ACCESS_MARKERS: Tuple[str, ...] = ("fieldload",)
OPTIONAL_MARKERS: Tuple[str, ...] = ("?",)
OPTIONAL_CHAIN_MARKER = "?."
TARGET_LABEL_LIMIT = 60
ARRAY_LOAD_MARKER = "arrayload"

# instanceinvoke this.<@entry/a.ets: Index.refresh()>()  ->  this.refresh
_STRICT_INVOKE_RE = re.compile(r"invoke\s+([\w%$]+)\.<[^>]*:\s*[\w%$]*\.(\w+)\([^)]*\)>")
# any name(...) fragment, first occurrence
_LOOSE_INVOKE_RE = re.compile(r"\.?(\w+)\([^()]*\)")
_ARRAY_ACCESS_RE = re.compile(r"arrayload|[\w%$)\]]\[[^\]]+\]")


@dataclass(frozen=True)
class RiskMatch:
    severity: str
    description: str
    confidence: str = "normal"


@dataclass(frozen=True)
class PatternHit:
    variable: str
    severity: str
    description: str


def is_invocation(text: str) -> bool:
    return any(marker in text for marker in INVOCATION_MARKERS)


def extract_invoke_target(text: str) -> Optional[str]:
    match = _STRICT_INVOKE_RE.search(text)
    if match:
        return f"{match.group(1)}.{match.group(2)}"
    match = _LOOSE_INVOKE_RE.search(text)
    if match:
        return match.group(1)
    return None


def target_label(text: str) -> Tuple[str, Optional[str]]:
    """Return (label, extracted_name); the raw text prefix stands in when nothing matches."""
    name = extract_invoke_target(text)
    return (name or text[:TARGET_LABEL_LIMIT]), name


def assess_risk(stmt_text: str, weak_signals: bool = False) -> Optional[RiskMatch]:
    """At most one match per statement; checks run in priority order."""
    snippet = stmt_text[:TARGET_LABEL_LIMIT]
    if UNDEFINED_TOKEN in stmt_text:
        return RiskMatch("high", f"Possible undefined variable access: {snippet}")
    if NULL_TOKEN in stmt_text:
        return RiskMatch("medium", f"Possible undefined variable access: {snippet}")
    if any(m in stmt_text for m in FIELD_ACCESS_MARKERS) and any(m in stmt_text for m in OPTIONAL_MARKERS):
        return RiskMatch("low", f"Possible undefined field access: {snippet}")
    if not weak_signals:
        return None
    if _ARRAY_ACCESS_RE.search(stmt_text):
        return RiskMatch("low", f"Array access may be out of bounds and yield undefined: {snippet}", "weak")
    if OPTIONAL_CHAIN_MARKER in stmt_text:
        return RiskMatch("low", f"Optional chaining may yield undefined: {snippet}", "weak")
    return None


def project_patterns(stmt_text: str) -> List[PatternHit]:
    """Every sweep pattern present in the statement, each reported on its own."""
    hits: List[PatternHit] = []
    if UNDEFINED_TOKEN in stmt_text:
        hits.append(PatternHit("value", "high", "Possible use of an undefined value"))
    if any(m in stmt_text for m in FIELD_ACCESS_MARKERS) and NULL_TOKEN in stmt_text:
        hits.append(PatternHit("field", "medium", "Possible null field access"))
    if ARRAY_LOAD_MARKER in stmt_text:
        hits.append(PatternHit("array element", "low", "Array access may be out of bounds and yield undefined"))
    # Optional chaining is already guarded; not a finding.
    return hits
