"""RuleResult 群を1つの診断リストにまとめる。

成功したルールの診断を登録順・ルール内の順で連結し、範囲とコードが
完全に一致するものは最初の1件だけ残す。重なるだけの範囲はそのまま残す。
"""
from __future__ import annotations
from typing import Iterable, List, Set, Tuple

from .models import AdvancedDiagnostic, Diagnostic, RuleResult


def aggregate(results: Iterable[RuleResult]) -> List[AdvancedDiagnostic]:
    seen: Set[Tuple[int, int, int, int, str]] = set()
    out: List[AdvancedDiagnostic] = []
    for res in results:
        if not res.success:
            continue
        for d in res.diagnostics:
            key = (d.range.start.line, d.range.start.character, d.range.end.line, d.range.end.character, d.code)
            if key in seen:
                continue
            seen.add(key)
            out.append(d)
    return out


def to_diagnostics(items: Iterable[AdvancedDiagnostic]) -> List[Diagnostic]:
    return [d.to_diagnostic() for d in items]


__all__ = ["aggregate", "to_diagnostics"]
