from __future__ import annotations

import re
from typing import Optional, Tuple

# @entry/src/main/ets/pages/Index.ets: Index.aboutToAppear(number, string)
ARK_METHOD_RE = re.compile(r"^@([^:]*):\s*(?:([^(]*)\.)?([^.(]+)\((.*)\)$")
# <@entry/.../Index.ets: Index.aboutToAppear()> as embedded in invoke text
EMBEDDED_SIG_RE = re.compile(r"<(@[^>]+\))>")


def normalize_signature(sig: str) -> str:
    sig = sig.strip()
    if sig.startswith("<") and sig.endswith(">"):
        sig = sig[1:-1].strip()
    return sig


def parse_signature(sig: str) -> Optional[Tuple[str, str, str, str]]:
    """Return (file, class, method, params) or None when ``sig`` is not a method signature."""
    match = ARK_METHOD_RE.match(normalize_signature(sig))
    if not match:
        return None
    file_path, class_name, method_name, params = match.groups()
    return file_path.strip(), (class_name or "").strip(), method_name.strip(), params.strip()


def method_name_from_signature(sig: str) -> str:
    parts = parse_signature(sig)
    if parts:
        return parts[2]
    sig = normalize_signature(sig)
    if "(" in sig:
        return sig.split("(", 1)[0].split(".")[-1].split(":")[-1].strip()
    return sig


def class_name_from_signature(sig: str) -> str:
    parts = parse_signature(sig)
    if parts:
        return parts[1]
    return ""


def method_key(class_name: str, method_name: str) -> str:
    return f"{class_name}.{method_name}"


def embedded_signature(text: str) -> Optional[str]:
    match = EMBEDDED_SIG_RE.search(text)
    return match.group(1) if match else None
