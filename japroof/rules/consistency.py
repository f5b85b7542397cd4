"""表記の揺れを多数決で検出するルール。

文書内で同じ対象に複数の書き方が混在している場合、出現数の多い表記
(同数なら先に現れた表記)を基準とし、それ以外の出現を指摘する。
書き方が1種類だけの文書では何も出さない。
括弧の対応崩れと中黒の重複は多数決とは別に常に指摘する。
"""
from __future__ import annotations
import re
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..detection import Hit, classify_matches, flag_minority, longest_non_overlapping
from ..models import AdvancedDiagnostic, Severity, Token
from .base import BaseRule, RuleContext

WIDTH_LABELS = {"full": "全角", "half": "半角"}


def to_halfwidth(text: str) -> str:
    return "".join(chr(ord(ch) - 0xFEE0) if "！" <= ch <= "～" else ch for ch in text)


def to_fullwidth(text: str) -> str:
    return "".join(chr(ord(ch) + 0xFEE0) if "!" <= ch <= "~" else ch for ch in text)


def convert_width(text: str, width: str) -> str:
    return to_fullwidth(text) if width == "full" else to_halfwidth(text)


class VotingRule(BaseRule):
    """hits を多数決にかけて少数派を指摘する共通処理。"""

    def vote(
        self,
        context: RuleContext,
        hits: Sequence[Hit],
        message: Callable[[Hit, str], str],
        suggestion: Callable[[Hit, str], Optional[str]],
    ) -> List[AdvancedDiagnostic]:
        dominant, minority = flag_minority(hits)
        out: List[AdvancedDiagnostic] = []
        for h in minority:
            fixed = suggestion(h, dominant)
            out.append(self.diagnostic(
                context, h.start, h.end,
                message(h, dominant),
                suggestions=[fixed] if fixed else (),
                data={"dominant": dominant, "variant": h.key},
            ))
        return out


# ---------------------------------------------------------------------------
# アルファベット・数字の全角半角

_ALPHA_PATTERNS = {
    "full": re.compile(r"[Ａ-Ｚａ-ｚ]+"),
    "half": re.compile(r"[A-Za-z]+"),
}
_DIGIT_PATTERNS = {
    "full": re.compile(r"[０-９]+"),
    "half": re.compile(r"[0-9]+"),
}


class AlphabetWidthRule(VotingRule):
    name = "alphabet-width"
    description = "全角と半角アルファベットの混在を検出します"
    code = "alphabet-width"
    config_flag = "enable_alphabet_width"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        hits = classify_matches(context.document_text, _ALPHA_PATTERNS)
        return self.vote(
            context, hits,
            lambda h, d: f"全角と半角アルファベットが混在しています。「{h.text}」を{WIDTH_LABELS[d]}に統一してください",
            lambda h, d: convert_width(h.text, d),
        )


class NumberWidthMixRule(VotingRule):
    name = "number-width-mix"
    description = "全角半角数字の混在を検出します"
    code = "number-width-mix"
    config_flag = "enable_number_width_mix"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        hits = classify_matches(context.document_text, _DIGIT_PATTERNS)
        return self.vote(
            context, hits,
            lambda h, d: f"数字「{h.text}」は{WIDTH_LABELS[h.key]}ですが、文書内では{WIDTH_LABELS[d]}が多く使われています",
            lambda h, d: convert_width(h.text, d),
        )


# ---------------------------------------------------------------------------
# 半角カナ

_HALF_KANA = "ｦｧｨｩｪｫｬｭｮｯｰｱｲｳｴｵｶｷｸｹｺｻｼｽｾｿﾀﾁﾂﾃﾄﾅﾆﾇﾈﾉﾊﾋﾌﾍﾎﾏﾐﾑﾒﾓﾔﾕﾖﾗﾘﾙﾚﾛﾜﾝ"
_FULL_KANA = "ヲァィゥェォャュョッーアイウエオカキクケコサシスセソタチツテトナニヌネノハヒフヘホマミムメモヤユヨラリルレロワン"
HALF_TO_FULL: Dict[str, str] = dict(zip(_HALF_KANA, _FULL_KANA))
DAKUTEN = "ﾞ"
HANDAKUTEN = "ﾟ"
_VOICED = {
    "ｶ": "ガ", "ｷ": "ギ", "ｸ": "グ", "ｹ": "ゲ", "ｺ": "ゴ",
    "ｻ": "ザ", "ｼ": "ジ", "ｽ": "ズ", "ｾ": "ゼ", "ｿ": "ゾ",
    "ﾀ": "ダ", "ﾁ": "ヂ", "ﾂ": "ヅ", "ﾃ": "デ", "ﾄ": "ド",
    "ﾊ": "バ", "ﾋ": "ビ", "ﾌ": "ブ", "ﾍ": "ベ", "ﾎ": "ボ",
    "ｳ": "ヴ",
}
_SEMI_VOICED = {"ﾊ": "パ", "ﾋ": "ピ", "ﾌ": "プ", "ﾍ": "ペ", "ﾎ": "ポ"}

_FULL_TO_HALF: Dict[str, str] = {v: k for k, v in HALF_TO_FULL.items()}
_FULL_TO_HALF.update({v: k + DAKUTEN for k, v in _VOICED.items()})
_FULL_TO_HALF.update({v: k + HANDAKUTEN for k, v in _SEMI_VOICED.items()})

_KANA_PATTERNS = {
    "half": re.compile(r"[ｦ-ﾟ]+"),
    "full": re.compile(r"[ァ-ヴー]+"),
}


def halfwidth_kana_to_fullwidth(text: str) -> str:
    """半角カナを全角にする。濁点・半濁点は直前の文字と合成する。"""
    out: List[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        nxt = text[i + 1] if i + 1 < len(text) else ""
        if nxt == DAKUTEN and ch in _VOICED:
            out.append(_VOICED[ch])
            i += 2
            continue
        if nxt == HANDAKUTEN and ch in _SEMI_VOICED:
            out.append(_SEMI_VOICED[ch])
            i += 2
            continue
        out.append(HALF_TO_FULL.get(ch, ch))
        i += 1
    return "".join(out)


def fullwidth_kana_to_halfwidth(text: str) -> str:
    return "".join(_FULL_TO_HALF.get(ch, ch) for ch in text)


class HalfwidthKanaRule(VotingRule):
    name = "halfwidth-kana"
    description = "半角カナと全角カナの混在を検出します"
    code = "halfwidth-kana"
    config_flag = "enable_halfwidth_kana"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        hits = classify_matches(context.document_text, _KANA_PATTERNS)

        def suggest(h: Hit, dominant: str) -> str:
            if dominant == "full":
                return halfwidth_kana_to_fullwidth(h.text)
            return fullwidth_kana_to_halfwidth(h.text)

        return self.vote(
            context, hits,
            lambda h, d: f"カナ「{h.text}」は{WIDTH_LABELS[h.key]}ですが、文書内では{WIDTH_LABELS[d]}カナが多く使われています",
            suggest,
        )


# ---------------------------------------------------------------------------
# 漢数字とアラビア数字

_KANJI_DIGITS = {"〇": 0, "零": 0, "一": 1, "壱": 1, "二": 2, "弐": 2, "三": 3, "参": 3,
                 "四": 4, "五": 5, "六": 6, "七": 7, "八": 8, "九": 9}
_SMALL_UNITS = {"十": 10, "百": 100, "千": 1000}
_LARGE_UNITS = {"万": 10_000, "億": 100_000_000}
_ARABIC_TO_KANJI = dict(zip("0123456789", "〇一二三四五六七八九"))

_NUMERAL_PATTERNS = {
    "kanji": re.compile(r"[〇零一壱二弐三参四五六七八九十百千万億]{2,}"),
    "arabic": re.compile(r"[0-9０-９]+"),
}
NUMERAL_LABELS = {"kanji": "漢数字", "arabic": "アラビア数字"}


def kanji_to_number(text: str) -> Optional[int]:
    """漢数字を整数にする。二〇二四 のような位取りなしの表記も受け付ける。"""
    if all(ch in _KANJI_DIGITS for ch in text):
        return int("".join(str(_KANJI_DIGITS[ch]) for ch in text))
    total = section = digit = 0
    for ch in text:
        if ch in _KANJI_DIGITS:
            digit = _KANJI_DIGITS[ch]
        elif ch in _SMALL_UNITS:
            section += (digit or 1) * _SMALL_UNITS[ch]
            digit = 0
        elif ch in _LARGE_UNITS:
            total += (section + digit or 1) * _LARGE_UNITS[ch]
            section = digit = 0
        else:
            return None
    return total + section + digit


def arabic_to_kanji(text: str) -> str:
    return "".join(_ARABIC_TO_KANJI.get(ch, ch) for ch in to_halfwidth(text))


class NumeralStyleMixRule(VotingRule):
    name = "numeral-style-mix"
    description = "漢数字とアラビア数字の混在を検出します"
    code = "numeral-style-mix"
    config_flag = "enable_numeral_style_mix"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        hits = classify_matches(context.document_text, _NUMERAL_PATTERNS)

        def suggest(h: Hit, dominant: str) -> Optional[str]:
            if dominant == "kanji":
                return arabic_to_kanji(h.text)
            value = kanji_to_number(h.text)
            return None if value is None else str(value)

        return self.vote(
            context, hits,
            lambda h, d: f"数字「{h.text}」は{NUMERAL_LABELS[h.key]}ですが、文書内では{NUMERAL_LABELS[d]}が多く使われています",
            suggest,
        )


# ---------------------------------------------------------------------------
# 数字と単位の間のスペース

UNITS = (
    "KB", "MB", "GB", "TB", "PB", "KiB", "MiB", "GiB", "TiB",
    "Hz", "kHz", "MHz", "GHz", "bps", "Kbps", "Mbps", "Gbps", "fps",
    "kg", "mg", "km", "cm", "mm", "mL", "ms", "ns", "kW", "MW", "mV", "kV", "mA", "dB",
)
_UNIT_RE = re.compile(
    r"(?<![A-Za-z\d.])(\d+(?:\.\d+)?)( ?)(" + "|".join(sorted(UNITS, key=len, reverse=True)) + r")(?![A-Za-z])"
)
SPACING_LABELS = {"spaced": "スペースあり", "unspaced": "スペースなし"}


class SpaceAroundUnitRule(VotingRule):
    name = "space-around-unit"
    description = "数字と単位の間のスペースの有無の揺れを検出します"
    code = "space-around-unit"
    config_flag = "enable_space_around_unit"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        hits: List[Hit] = []
        for m in _UNIT_RE.finditer(context.document_text):
            key = "spaced" if m.group(2) else "unspaced"
            hits.append(Hit(m.start(), m.end(), key, m.group(0)))

        def suggest(h: Hit, dominant: str) -> str:
            m = _UNIT_RE.fullmatch(h.text)
            sep = " " if dominant == "spaced" else ""
            return f"{m.group(1)}{sep}{m.group(3)}"

        return self.vote(
            context, hits,
            lambda h, d: f"「{h.text}」は数字と単位の間が{SPACING_LABELS[h.key]}ですが、文書内では{SPACING_LABELS[d]}が多く使われています",
            suggest,
        )


# ---------------------------------------------------------------------------
# 括弧の対応

BRACKET_PAIRS: Dict[str, str] = {
    "「": "」", "『": "』", "（": "）", "【": "】", "〔": "〕",
    "［": "］", "｛": "｝", "《": "》", "〈": "〉",
    "(": ")", "[": "]", "{": "}",
}
CLOSING: Dict[str, str] = {v: k for k, v in BRACKET_PAIRS.items()}
_PAREN_WIDTH = {"（": "full", "(": "half"}


def bracket_issues(text: str) -> List[Tuple[str, int, str]]:
    """対応の取れない括弧を (種別, 位置, 括弧) で返す。種別は unclosed / unopened。"""
    issues: List[Tuple[str, int, str]] = []
    stack: List[Tuple[str, int]] = []
    for i, ch in enumerate(text):
        if ch in BRACKET_PAIRS:
            stack.append((ch, i))
            continue
        opener = CLOSING.get(ch)
        if opener is None:
            continue
        depth = next((k for k in range(len(stack) - 1, -1, -1) if stack[k][0] == opener), None)
        if depth is None:
            issues.append(("unopened", i, ch))
            continue
        # 間に残った開き括弧は閉じられていない
        for bracket, pos in stack[depth + 1:]:
            issues.append(("unclosed", pos, bracket))
        del stack[depth:]
    issues.extend(("unclosed", pos, bracket) for bracket, pos in stack)
    issues.sort(key=lambda x: x[1])
    return issues


class BracketQuoteMismatchRule(VotingRule):
    name = "bracket-quote-mismatch"
    description = "括弧・鉤括弧の対応の崩れと丸括弧の全角半角の混在を検出します"
    code = "bracket-quote-mismatch"
    config_flag = "enable_bracket_quote_mismatch"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        text = context.document_text
        out: List[AdvancedDiagnostic] = []
        for kind, pos, bracket in bracket_issues(text):
            if kind == "unclosed":
                partner = BRACKET_PAIRS[bracket]
                msg = f"開き括弧「{bracket}」に対応する閉じ括弧「{partner}」がありません"
            else:
                partner = CLOSING[bracket]
                msg = f"閉じ括弧「{bracket}」に対応する開き括弧「{partner}」がありません"
            out.append(self.diagnostic(
                context, pos, pos + 1, msg,
                suggestions=[partner],
                severity=Severity.ERROR,
                data={"kind": kind},
            ))
        hits = [Hit(i, i + 1, _PAREN_WIDTH[ch], ch) for i, ch in enumerate(text) if ch in _PAREN_WIDTH]
        out.extend(self.vote(
            context, hits,
            lambda h, d: f"丸括弧「{h.text}」は{WIDTH_LABELS[h.key]}ですが、文書内では{WIDTH_LABELS[d]}の丸括弧が多く使われています",
            lambda h, d: convert_width(h.text, d),
        ))
        out.sort(key=lambda d: (d.start, d.end))
        return out


# ---------------------------------------------------------------------------
# 日付表記

_DATE_PATTERNS = {
    "kanji": re.compile(r"(?<![\d年])(\d{4})年(\d{1,2})月(?:(\d{1,2})日)?"),
    "slash": re.compile(r"(?<![\d/])(\d{4})/(\d{1,2})(?:/(\d{1,2}))?(?![\d/])"),
    "hyphen": re.compile(r"(?<![\d-])(\d{4})-(\d{1,2})(?:-(\d{1,2}))?(?![\d-])"),
    "era": re.compile(r"(令和|平成|昭和|大正|明治)(\d{1,2}|元)年(?:(\d{1,2})月)?(?:(\d{1,2})日)?"),
}
DATE_LABELS = {
    "kanji": "漢字形式(例: 2024年1月1日)",
    "slash": "スラッシュ形式(例: 2024/1/1)",
    "hyphen": "ハイフン形式(例: 2024-01-01)",
    "era": "和暦形式(例: 令和6年1月1日)",
}
# 元年の前年 (西暦 = 基準 + 和暦年)
ERAS: Tuple[Tuple[str, int], ...] = (
    ("令和", 2018), ("平成", 1988), ("昭和", 1925), ("大正", 1911), ("明治", 1867),
)


def parse_date(kind: str, text: str) -> Optional[Tuple[int, Optional[int], Optional[int]]]:
    m = _DATE_PATTERNS[kind].fullmatch(text)
    if m is None:
        return None
    if kind == "era":
        base = dict(ERAS)[m.group(1)]
        year = base + (1 if m.group(2) == "元" else int(m.group(2)))
        month, day = m.group(3), m.group(4)
    else:
        year, month, day = int(m.group(1)), m.group(2), m.group(3)
    return year, int(month) if month else None, int(day) if day else None


def format_date(kind: str, year: int, month: Optional[int], day: Optional[int]) -> Optional[str]:
    if kind == "era":
        for era, base in ERAS:
            if year > base:
                n = year - base
                out = f"{era}{'元' if n == 1 else n}年"
                break
        else:
            return None
        if month:
            out += f"{month}月"
            if day:
                out += f"{day}日"
        return out
    if month is None:
        return f"{year}年" if kind == "kanji" else None
    if kind == "kanji":
        return f"{year}年{month}月" + (f"{day}日" if day else "")
    if kind == "slash":
        return f"{year}/{month}" + (f"/{day}" if day else "")
    return f"{year}-{month:02d}" + (f"-{day:02d}" if day else "")


class DateFormatVariantRule(VotingRule):
    name = "date-format-variant"
    description = "日付表記の揺れを検出します"
    code = "date-format-variant"
    config_flag = "enable_date_format_variant"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        hits = longest_non_overlapping(classify_matches(context.document_text, _DATE_PATTERNS))

        def suggest(h: Hit, dominant: str) -> Optional[str]:
            parsed = parse_date(h.key, h.text)
            return format_date(dominant, *parsed) if parsed else None

        return self.vote(
            context, hits,
            lambda h, d: f"日付「{h.text}」は{DATE_LABELS[h.key]}ですが、文書内では{DATE_LABELS[d]}が多く使われています",
            suggest,
        )


# ---------------------------------------------------------------------------
# 範囲を表す記号

RANGE_SYMBOLS = "〜～~‐‑‒–—―－-"
SYMBOL_NAMES = {
    "〜": "波ダッシュ", "～": "全角チルダ", "~": "半角チルダ",
    "–": "エンダッシュ", "—": "エムダッシュ", "―": "水平線",
    "－": "全角ハイフン", "-": "ハイフンマイナス",
}
_RANGE_RE = re.compile(
    r"(?<![A-Za-z\d:.])(\d{1,2}:\d{2}|\d+)\s?([" + re.escape(RANGE_SYMBOLS) + r"])\s?(\d{1,2}:\d{2}|\d+)(?![\d:])"
)


class DashTildeNormalizationRule(VotingRule):
    name = "dash-tilde-normalization"
    description = "範囲を表す記号(〜、-、– など)の揺れを検出します"
    code = "dash-tilde-normalization"
    config_flag = "enable_dash_tilde_normalization"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        hits: List[Hit] = []
        for m in _RANGE_RE.finditer(context.document_text):
            # 日付のハイフン区切りは範囲ではない
            if m.group(2) == "-" and re.match(r"\d{4}-\d{1,2}(?:-\d{1,2})?$", m.group(0)):
                continue
            hits.append(Hit(m.start(), m.end(), m.group(2), m.group(0)))

        def name(symbol: str) -> str:
            return SYMBOL_NAMES.get(symbol, "ダッシュ類")

        return self.vote(
            context, hits,
            lambda h, d: f"範囲表現「{h.text}」の{name(h.key)}「{h.key}」は、文書内で多く使われている{name(d)}「{d}」に統一してください",
            lambda h, d: h.text.replace(h.key, d, 1),
        )


# ---------------------------------------------------------------------------
# 中黒

_NAKAGURO_RUN = re.compile(r"[・･]{2,}")
_NAKAGURO_PATTERNS = {"full": re.compile(r"・"), "half": re.compile(r"･")}
NAKAGURO = {"full": "・", "half": "･"}


class NakaguroUsageRule(VotingRule):
    name = "nakaguro-usage"
    description = "中黒の重複と全角半角の混在を検出します"
    code = "nakaguro-usage"
    config_flag = "enable_nakaguro_usage"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        text = context.document_text
        out: List[AdvancedDiagnostic] = []
        runs = []
        for m in _NAKAGURO_RUN.finditer(text):
            runs.append((m.start(), m.end()))
            out.append(self.diagnostic(
                context, m.start(), m.end(),
                f"中黒「{m.group(0)}」が{len(m.group(0))}個連続しています。1個にしてください",
                suggestions=["・"],
            ))
        # 重複している中黒は幅の多数決から外す
        hits = [
            h for h in classify_matches(text, _NAKAGURO_PATTERNS)
            if not any(s <= h.start < e for s, e in runs)
        ]
        out.extend(self.vote(
            context, hits,
            lambda h, d: f"中黒「{h.text}」は{WIDTH_LABELS[h.key]}ですが、文書内では{WIDTH_LABELS[d]}の中黒が多く使われています",
            lambda h, d: NAKAGURO[d],
        ))
        out.sort(key=lambda d: (d.start, d.end))
        return out


# ---------------------------------------------------------------------------
# 記号の全角半角

SYMBOL_PAIRS: Tuple[Tuple[str, str, str], ...] = (
    ("：", ":", "コロン"),
    ("；", ";", "セミコロン"),
    ("／", "/", "スラッシュ"),
    ("＼", "\\", "バックスラッシュ"),
    ("？", "?", "疑問符"),
    ("！", "!", "感嘆符"),
    ("＆", "&", "アンパサンド"),
    ("＝", "=", "イコール"),
    ("＋", "+", "プラス"),
    ("＊", "*", "アスタリスク"),
    ("＃", "#", "シャープ"),
    ("＄", "$", "ドル記号"),
    ("％", "%", "パーセント"),
    ("＠", "@", "アットマーク"),
)


class SymbolWidthMixRule(VotingRule):
    name = "symbol-width-mix"
    description = "全角半角記号の混在を記号ごとに検出します"
    code = "symbol-width-mix"
    config_flag = "enable_symbol_width_mix"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        text = context.document_text
        out: List[AdvancedDiagnostic] = []
        for full, half, label in SYMBOL_PAIRS:
            widths = {full: "full", half: "half"}
            hits = [Hit(i, i + 1, widths[ch], ch) for i, ch in enumerate(text) if ch in widths]
            counterpart = {"full": full, "half": half}
            out.extend(self.vote(
                context, hits,
                lambda h, d, label=label: f"{label}「{h.text}」は{WIDTH_LABELS[h.key]}ですが、文書内では{WIDTH_LABELS[d]}が多く使われています",
                lambda h, d, counterpart=counterpart: counterpart[d],
            ))
        out.sort(key=lambda d: (d.start, d.end))
        return out


__all__ = [
    "VotingRule",
    "AlphabetWidthRule",
    "NumberWidthMixRule",
    "HalfwidthKanaRule",
    "NumeralStyleMixRule",
    "SpaceAroundUnitRule",
    "BracketQuoteMismatchRule",
    "DateFormatVariantRule",
    "DashTildeNormalizationRule",
    "NakaguroUsageRule",
    "SymbolWidthMixRule",
    "bracket_issues",
    "halfwidth_kana_to_fullwidth",
    "kanji_to_number",
    "to_fullwidth",
    "to_halfwidth",
]
