from __future__ import annotations

from lifecycle_analyzer.utils.signatures import (
    class_name_from_signature,
    embedded_signature,
    method_key,
    method_name_from_signature,
    normalize_signature,
    parse_signature,
)


def test_parse_ark_signature() -> None:
    sig = "@entry/src/main/ets/pages/Index.ets: Index.aboutToAppear(number, string)"
    assert parse_signature(sig) == ("entry/src/main/ets/pages/Index.ets", "Index", "aboutToAppear", "number, string")
    assert parse_signature(f"<{sig}>") == parse_signature(sig)
    assert class_name_from_signature(sig) == "Index"


def test_parse_signature_without_class() -> None:
    assert parse_signature("@%unk/%unk: .pop()") == ("%unk/%unk", "", "pop", "")
    assert parse_signature("not a signature") is None


def test_method_name_fallbacks() -> None:
    assert method_name_from_signature("@a.ets: A.build()") == "build"
    assert method_name_from_signature("obj.refresh(x)") == "refresh"
    assert method_name_from_signature("plain") == "plain"


def test_embedded_signature() -> None:
    text = "instanceinvoke this.<@entry/a.ets: Index.refresh()>(%0)"
    assert embedded_signature(text) == "@entry/a.ets: Index.refresh()"
    assert embedded_signature("%0 = undefined") is None


def test_normalize_and_key() -> None:
    assert normalize_signature("  <@a.ets: A.b()>  ") == "@a.ets: A.b()"
    assert method_key("Index", "build") == "Index.build"
