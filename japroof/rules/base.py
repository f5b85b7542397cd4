"""ルールの共通インターフェース。

各ルールは name / description / check / is_enabled を持つ。
is_enabled は設定の真偽値1つだけを参照し、check は入力だけで結果が決まる。
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Protocol, Sequence, Tuple, runtime_checkable

from ..config import AdvancedRulesConfig
from ..models import AdvancedDiagnostic, Sentence, Severity, Token, make_range


@dataclass(frozen=True)
class RuleContext:
    document_text: str
    sentences: Tuple[Sentence, ...]
    config: AdvancedRulesConfig


@runtime_checkable
class Rule(Protocol):
    name: str
    description: str

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        ...

    def is_enabled(self, config: AdvancedRulesConfig) -> bool:
        ...


class BaseRule:
    name = ""
    description = ""
    code = ""
    config_flag = ""
    severity = Severity.WARNING

    def is_enabled(self, config: AdvancedRulesConfig) -> bool:
        return bool(getattr(config, self.config_flag))

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        raise NotImplementedError

    def diagnostic(
        self,
        context: RuleContext,
        start: int,
        end: int,
        message: str,
        suggestions: Sequence[str] = (),
        data: Optional[Mapping[str, Any]] = None,
        severity: Optional[Severity] = None,
    ) -> AdvancedDiagnostic:
        return AdvancedDiagnostic(
            range=make_range(context.document_text, start, end),
            message=message,
            code=self.code,
            rule_name=self.name,
            start=start,
            end=end,
            severity=self.severity if severity is None else severity,
            suggestions=tuple(suggestions),
            data=dict(data or {}),
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


__all__ = ["RuleContext", "Rule", "BaseRule"]
