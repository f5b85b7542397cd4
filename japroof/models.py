"""解析で共有するデータモデル。

- Token: 形態素1つ分 (表層形・品詞・活用・原形・読み・文字オフセット)
- Sentence: 句点で区切られたトークン列と元テキスト
- AdvancedDiagnostic: ルールが生成する診断 (不変)
- RuleResult / DocumentAnalysis: 実行記録と文書バージョン付きの解析結果

エンティティは不変データとし、派生値は自由関数で計算する。
"""
from __future__ import annotations
import re
import time
from dataclasses import dataclass, field
from enum import IntEnum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

SOURCE = "japroof"

# 文末記号
TERMINALS = "。！？!?"

ERROR_TYPES: Tuple[str, ...] = (
    "style-inconsistency",
    "ra-nuki",
    "double-negation",
    "particle-repetition",
    "conjunction-repetition",
    "adversative-ga",
    "alphabet-width",
    "weak-expression",
    "comma-count",
    "term-notation",
    "kanji-opening",
    "redundant-expression",
    "tautology",
    "no-particle-chain",
    "monotonous-ending",
    "long-sentence",
    "sahen-verb",
    "missing-subject",
    "twisted-sentence",
    "homophone",
    "honorific-error",
    "adverb-agreement",
    "modifier-position",
    "ambiguous-demonstrative",
    "passive-overuse",
    "noun-chain",
    "conjunction-misuse",
    "okurigana-variant",
    "orthography-variant",
    "katakana-chouon",
    "number-width-mix",
    "halfwidth-kana",
    "numeral-style-mix",
    "space-around-unit",
    "bracket-quote-mismatch",
    "date-format-variant",
    "dash-tilde-normalization",
    "nakaguro-usage",
    "symbol-width-mix",
)


class Severity(IntEnum):
    ERROR = 0
    WARNING = 1
    INFORMATION = 2
    HINT = 3

    @classmethod
    def parse(cls, value: str | int) -> "Severity":
        if isinstance(value, int):
            return cls(value)
        return cls[value.strip().upper()]


@dataclass(frozen=True)
class Token:
    """形態素。オフセットは半開区間 [start, end)。"""
    surface: str
    pos: str
    start: int
    end: int
    pos_detail1: str = "*"
    pos_detail2: str = "*"
    pos_detail3: str = "*"
    conjugation: str = "*"
    conjugation_form: str = "*"
    base_form: str = ""
    reading: str = ""
    pronunciation: str = ""

    @property
    def is_particle(self) -> bool:
        return is_particle(self)

    @property
    def is_verb(self) -> bool:
        return is_verb(self)

    @property
    def is_noun(self) -> bool:
        return is_noun(self)

    @property
    def is_adjective(self) -> bool:
        return is_adjective(self)

    @property
    def is_adverb(self) -> bool:
        return is_adverb(self)


def is_particle(token: Token) -> bool:
    return token.pos == "助詞"


def is_verb(token: Token) -> bool:
    return token.pos == "動詞"


def is_noun(token: Token) -> bool:
    return token.pos == "名詞"


def is_adjective(token: Token) -> bool:
    return token.pos == "形容詞"


def is_adverb(token: Token) -> bool:
    return token.pos == "副詞"


def is_terminal(token: Token) -> bool:
    return bool(token.surface) and all(ch in TERMINALS for ch in token.surface)


def validate_tokens(tokens: Sequence[Token]) -> Optional[str]:
    """トークン列の不変条件を検査し、違反があれば理由を返す。"""
    prev_end = -1
    for i, tok in enumerate(tokens):
        if tok.start >= tok.end:
            return f"token {i} has empty span [{tok.start}, {tok.end})"
        if tok.start < prev_end:
            return f"token {i} overlaps or is out of order (start={tok.start}, previous end={prev_end})"
        prev_end = tok.end
    return None


@dataclass(frozen=True)
class Sentence:
    text: str
    tokens: Tuple[Token, ...]
    start: int
    end: int
    comma_count: int


def make_sentence(tokens: Sequence[Token], document_text: str) -> Sentence:
    if not tokens:
        raise ValueError("a sentence needs at least one token")
    start = tokens[0].start
    end = tokens[-1].end
    text = document_text[start:end]
    return Sentence(text=text, tokens=tuple(tokens), start=start, end=end, comma_count=text.count("、"))


_TRAILING = re.compile(r"[。！？!?\s]+$")


def strip_terminals(text: str) -> str:
    return _TRAILING.sub("", text)


def ends_with_desu_masu(sentence: Sentence) -> bool:
    body = strip_terminals(sentence.text)
    return body.endswith("です") or body.endswith("ます")


def ends_with_dearu(sentence: Sentence) -> bool:
    return strip_terminals(sentence.text).endswith("である")


@dataclass(frozen=True)
class Position:
    line: int
    character: int


@dataclass(frozen=True)
class Range:
    start: Position
    end: Position

    def to_dict(self) -> Dict[str, Dict[str, int]]:
        return {
            "start": {"line": self.start.line, "character": self.start.character},
            "end": {"line": self.end.line, "character": self.end.character},
        }


def offset_to_position(text: str, offset: int) -> Position:
    # 0始まりの行/桁
    offset = max(0, min(offset, len(text)))
    line = text.count("\n", 0, offset)
    last_nl = text.rfind("\n", 0, offset)
    return Position(line=line, character=offset - (last_nl + 1))


def make_range(text: str, start: int, end: int) -> Range:
    return Range(offset_to_position(text, start), offset_to_position(text, end))


@dataclass(frozen=True)
class Diagnostic:
    """外部スキーマ向けの素の診断。"""
    range: Range
    severity: int
    message: str
    code: str
    source: str = SOURCE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "range": self.range.to_dict(),
            "severity": self.severity,
            "message": self.message,
            "code": self.code,
            "source": self.source,
        }


@dataclass(frozen=True)
class AdvancedDiagnostic:
    range: Range
    message: str
    code: str
    rule_name: str
    start: int
    end: int
    severity: Severity = Severity.WARNING
    source: str = SOURCE
    suggestions: Tuple[str, ...] = ()
    data: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.code not in ERROR_TYPES:
            raise ValueError(f"unknown diagnostic code: {self.code}")
        object.__setattr__(self, "severity", Severity(self.severity))
        object.__setattr__(self, "suggestions", tuple(self.suggestions))
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(
            range=self.range,
            severity=int(self.severity),
            message=self.message,
            code=self.code,
            source=self.source,
        )

    def to_dict(self) -> Dict[str, Any]:
        d = self.to_diagnostic().to_dict()
        d["ruleName"] = self.rule_name
        d["suggestions"] = list(self.suggestions)
        if self.data:
            d["data"] = dict(self.data)
        return d


@dataclass
class RuleResult:
    """1回の実行における1ルール分の記録。"""
    rule_name: str
    diagnostics: List[AdvancedDiagnostic] = field(default_factory=list)
    execution_time: float = 0.0  # ms
    success: bool = True
    error: Optional[BaseException] = None

    def set_error(self, error: BaseException) -> None:
        self.success = False
        self.error = error
        self.diagnostics = []


@dataclass(frozen=True)
class DocumentAnalysis:
    uri: str
    version: int
    diagnostics: Tuple[AdvancedDiagnostic, ...] = ()
    rule_results: Tuple[RuleResult, ...] = ()
    timestamp: float = field(default_factory=time.time)
    error: Optional[Exception] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def is_stale(self, current_version: int) -> bool:
        return self.version < current_version


__all__ = [
    "SOURCE",
    "TERMINALS",
    "ERROR_TYPES",
    "Severity",
    "Token",
    "Sentence",
    "Position",
    "Range",
    "Diagnostic",
    "AdvancedDiagnostic",
    "RuleResult",
    "DocumentAnalysis",
    "is_particle",
    "is_verb",
    "is_noun",
    "is_adjective",
    "is_adverb",
    "is_terminal",
    "validate_tokens",
    "make_sentence",
    "strip_terminals",
    "ends_with_desu_masu",
    "ends_with_dearu",
    "offset_to_position",
    "make_range",
]
