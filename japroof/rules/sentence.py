"""文単位の集計で検出するルール。

読点の数、文の長さ、文末表現の連続、受動態の多用、主語の欠落、
接続詞・逆接「が」の連続、文頭の指示語、文体(です・ます/だ・である)の混在。
"""
from __future__ import annotations
import re
from typing import Dict, List, Optional, Sequence, Tuple

from ..detection import Hit, consecutive_runs, find_literals, flag_minority
from ..models import (
    AdvancedDiagnostic,
    Sentence,
    Severity,
    Token,
    is_noun,
    is_particle,
    is_verb,
    strip_terminals,
)
from .base import BaseRule, RuleContext


class CommaCountRule(BaseRule):
    name = "comma-count"
    description = "一文中の読点の数をチェックします"
    code = "comma-count"
    config_flag = "enable_comma_count"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        threshold = context.config.comma_count_threshold
        out: List[AdvancedDiagnostic] = []
        for s in context.sentences:
            if s.comma_count > threshold:
                out.append(self.diagnostic(
                    context, s.start, s.end,
                    f"一文に読点が{s.comma_count}個あります(上限{threshold}個)。文を分けることを検討してください",
                    data={"comma_count": s.comma_count, "threshold": threshold},
                ))
        return out


def split_suggestion(text: str) -> Optional[str]:
    """中央に最も近い読点で文を2つに分けた案。"""
    commas = [i for i, ch in enumerate(text) if ch == "、"]
    if not commas:
        return None
    middle = len(text) / 2
    pos = min(commas, key=lambda i: (abs(i - middle), i))
    return text[:pos] + "。" + text[pos + 1:]


class LongSentenceRule(BaseRule):
    name = "long-sentence"
    description = "長すぎる文を検出します"
    code = "long-sentence"
    config_flag = "enable_long_sentence"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        threshold = context.config.long_sentence_threshold
        out: List[AdvancedDiagnostic] = []
        for s in context.sentences:
            length = len(s.text)
            if length <= threshold:
                continue
            split = split_suggestion(s.text)
            out.append(self.diagnostic(
                context, s.start, s.end,
                f"文が長すぎます({length}文字、上限{threshold}文字)。複数の文に分けることを検討してください",
                suggestions=[split] if split else [],
                data={"character_count": length, "threshold": threshold},
            ))
        return out


# 長い語尾から照合する
_ENDING_RE = re.compile(r"(です|ます|である|だった|でした|ました|だ|た)$")

ENDING_VARIATIONS: Dict[str, Tuple[str, ...]] = {
    "です": ("である", "だ", "になります", "となります"),
    "ます": ("る", "である", "だ", "になる", "となる"),
    "である": ("です", "だ", "になる", "となる"),
    "だ": ("です", "である", "になる", "となる"),
    "ました": ("た", "だった", "でした"),
    "た": ("ました", "だった", "でした"),
    "でした": ("ました", "た", "だった"),
    "だった": ("でした", "た", "ました"),
}


def sentence_ending(sentence: Sentence) -> Optional[str]:
    m = _ENDING_RE.search(strip_terminals(sentence.text))
    return m.group(1) if m else None


class MonotonousEndingRule(BaseRule):
    name = "monotonous-ending"
    description = "文末表現の単調さを検出します"
    code = "monotonous-ending"
    config_flag = "enable_monotonous_ending"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        threshold = context.config.monotonous_ending_threshold
        sentences = context.sentences
        endings = [sentence_ending(s) for s in sentences]
        out: List[AdvancedDiagnostic] = []
        for first, last in consecutive_runs(endings, threshold):
            ending = endings[first]
            count = last - first + 1
            out.append(self.diagnostic(
                context, sentences[first].start, sentences[last].end,
                f"文末が「{ending}」で{count}文連続しています。文末表現に変化をつけてください",
                suggestions=ENDING_VARIATIONS.get(ending, ()),
                data={"ending": ending, "count": count, "threshold": threshold},
            ))
        return out


def is_passive_marker(tok: Token) -> bool:
    return tok.pos in ("動詞", "助動詞") and tok.base_form in ("れる", "られる")


class PassiveOveruseRule(BaseRule):
    name = "passive-overuse"
    description = "受動態の多用を検出します"
    code = "passive-overuse"
    config_flag = "enable_passive_overuse"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        cfg = context.config
        sentences = context.sentences
        counts = [sum(1 for t in s.tokens if is_passive_marker(t)) for s in sentences]
        window = cfg.passive_overuse_window
        out: List[AdvancedDiagnostic] = []
        i = 0
        while i < len(sentences):
            span = range(i, min(i + window, len(sentences)))
            total = sum(counts[k] for k in span)
            if total >= cfg.passive_overuse_threshold:
                marked = [k for k in span if counts[k]]
                out.append(self.diagnostic(
                    context, sentences[marked[0]].start, sentences[marked[-1]].end,
                    f"{len(span)}文の中で受動態が{total}回使われています。能動態への書き換えを検討してください",
                    data={"count": total, "threshold": cfg.passive_overuse_threshold, "window": window},
                ))
                i = span.stop
            else:
                i += 1
        return out


MISSING_SUBJECT_MAX_LENGTH = 25
_POLITE_PREDICATE = re.compile(r"(ました|ます|でした|です)$")


class MissingSubjectRule(BaseRule):
    name = "missing-subject"
    description = "主語が省略された短い文を検出します"
    code = "missing-subject"
    config_flag = "enable_missing_subject"
    severity = Severity.INFORMATION

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        out: List[AdvancedDiagnostic] = []
        for s in context.sentences:
            body = strip_terminals(s.text)
            if len(body) >= MISSING_SUBJECT_MAX_LENGTH or not _POLITE_PREDICATE.search(body):
                continue
            if not any(is_verb(t) for t in s.tokens):
                continue
            if any(is_particle(t) and t.surface in ("は", "が") for t in s.tokens):
                continue
            out.append(self.diagnostic(
                context, s.start, s.end,
                "主語が明示されていません。誰が・何が行うのかを補うことを検討してください",
            ))
        return out


CONJUNCTIONS = (
    "しかし", "また", "そして", "それで", "だから", "ところが",
    "すると", "それから", "さらに", "ただし", "なお", "ちなみに",
    "つまり", "要するに", "したがって", "ゆえに", "なぜなら",
)

CONJUNCTION_ALTERNATIVES: Dict[str, Tuple[str, ...]] = {
    "しかし": ("ところが", "けれども", "一方で"),
    "また": ("さらに", "加えて", "そのうえ"),
    "そして": ("それから", "さらに", "加えて"),
    "だから": ("したがって", "よって", "そのため"),
    "つまり": ("要するに", "言い換えれば", "すなわち"),
}

CONJUNCTION_REPETITION_RUN = 2


def leading_conjunction(sentence: Sentence) -> Optional[str]:
    head = sentence.text.lstrip()
    for conj in sorted(CONJUNCTIONS, key=len, reverse=True):
        if head.startswith(conj):
            return conj
    return None


class ConjunctionRepetitionRule(BaseRule):
    name = "conjunction-repetition"
    description = "同じ接続詞の連続使用を検出します"
    code = "conjunction-repetition"
    config_flag = "enable_conjunction_repetition"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        sentences = context.sentences
        keys = [leading_conjunction(s) for s in sentences]
        out: List[AdvancedDiagnostic] = []
        for first, last in consecutive_runs(keys, CONJUNCTION_REPETITION_RUN):
            conj = keys[first]
            start = sentences[first].start + sentences[first].text.index(conj)
            end = sentences[last].start + sentences[last].text.index(conj) + len(conj)
            out.append(self.diagnostic(
                context, start, end,
                f"接続詞「{conj}」が{last - first + 1}文続けて使われています",
                suggestions=CONJUNCTION_ALTERNATIVES.get(conj, ()),
            ))
        return out


ADVERSATIVE_GA_RUN = 2


def adversative_ga(sentence: Sentence) -> Optional[Token]:
    """述語に続く接続の「が」を返す。"""
    toks = sentence.tokens
    for i, tok in enumerate(toks):
        if tok.surface != "が" or not is_particle(tok) or i == 0:
            continue
        prev = toks[i - 1]
        if tok.pos_detail1 == "接続助詞" or prev.pos in ("動詞", "形容詞", "助動詞"):
            return tok
    return None


class AdversativeGaRule(BaseRule):
    name = "adversative-ga"
    description = "逆接の「が」の連続使用を検出します"
    code = "adversative-ga"
    config_flag = "enable_adversative_ga"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        found = [adversative_ga(s) for s in context.sentences]
        keys = ["ga" if t is not None else None for t in found]
        out: List[AdvancedDiagnostic] = []
        for first, last in consecutive_runs(keys, ADVERSATIVE_GA_RUN):
            out.append(self.diagnostic(
                context, found[first].start, found[last].end,
                f"逆接の「が」が{last - first + 1}文続けて使われています。文を分けて「しかし」などでつなぐことを検討してください",
            ))
        return out


# 複数の指示語が同じ対象を指しているか判別しにくい定型
AMBIGUOUS_DEMONSTRATIVE_PATTERNS: Dict[str, str] = {
    "それは問題だ。しかし、それも": "複数の「それ」が異なる対象を指している可能性があります",
    "これについては、あれを参照": "「これ」「あれ」の指す対象が不明確です",
    "それについて、それを": "「それ」が繰り返し使用され、指す対象が曖昧です",
    "あれは重要だ。あれも": "複数の「あれ」の指す対象を明確にしてください",
    "これが正しい。これは": "「これ」が繰り返し使用され、指す対象が曖昧です",
}

# 文書冒頭で先行詞を持たない指示語
STANDALONE_DEMONSTRATIVE_RE = re.compile(r"^(それは[^。]*問題|これは[^。]*重要|あれは[^。]*必要)")

# 連体詞(この/その/あの)は対象外
DEMONSTRATIVE_PRONOUNS = ("これ", "それ", "あれ")


def _is_antecedent(tok: Token) -> bool:
    return is_noun(tok) and tok.pos_detail1 != "代名詞" and tok.surface not in DEMONSTRATIVE_PRONOUNS


class AmbiguousDemonstrativeRule(BaseRule):
    name = "ambiguous-demonstrative"
    description = "曖昧な指示語の使用を検出します"
    code = "ambiguous-demonstrative"
    config_flag = "enable_ambiguous_demonstrative"
    severity = Severity.INFORMATION

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        text = context.document_text
        spans: List[Tuple[int, int, str]] = [
            (h.start, h.end, AMBIGUOUS_DEMONSTRATIVE_PATTERNS[h.key])
            for h in find_literals(text, AMBIGUOUS_DEMONSTRATIVE_PATTERNS)
        ]
        m = STANDALONE_DEMONSTRATIVE_RE.match(text)
        if m:
            spans.append((0, m.end(), "文書の冒頭の指示語には先行詞がありません"))
        covered = [(s, e) for s, e, _ in spans]

        prev: Optional[Sentence] = None
        for s in context.sentences:
            head = s.tokens[0]
            if prev is not None and head.surface in DEMONSTRATIVE_PRONOUNS and is_noun(head):
                nouns = {t.surface for t in prev.tokens if _is_antecedent(t)}
                inside = any(a <= head.start < b for a, b in covered)
                if len(nouns) >= 2 and not inside:
                    spans.append((head.start, head.end, f"直前の文に名詞が{len(nouns)}個あり、「{head.surface}」の指す対象が曖昧です"))
            prev = s

        spans.sort(key=lambda x: (x[0], x[1]))
        return [
            self.diagnostic(
                context, start, end,
                f"曖昧な指示語が検出されました。{reason}",
                suggestions=["具体的な名詞で置き換える"],
            )
            for start, end, reason in spans
        ]


# 文体判定
_POLITE_RE = re.compile(r"(です|ます|でした|ました|ません|ましょう)$")
_PLAIN_RE = re.compile(r"(である|ている|てある|[^し]た|[^ん]だ)$")


def sentence_register(sentence: Sentence) -> Optional[str]:
    body = strip_terminals(sentence.text)
    if _POLITE_RE.search(body):
        return "polite"
    if _PLAIN_RE.search(body):
        return "plain"
    return None


REGISTER_LABELS = {"polite": "です・ます調", "plain": "だ・である調"}
REGISTER_ENDINGS = {"polite": "です・ます", "plain": "である"}


class StyleConsistencyRule(BaseRule):
    name = "style-consistency"
    description = "文体(です・ます調/だ・である調)の混在を検出します"
    code = "style-inconsistency"
    config_flag = "enable_style_consistency"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        hits = []
        for s in context.sentences:
            reg = sentence_register(s)
            if reg:
                hits.append(Hit(s.start, s.end, reg, s.text))
        dominant, minority = flag_minority(hits)
        out: List[AdvancedDiagnostic] = []
        for h in minority:
            out.append(self.diagnostic(
                context, h.start, h.end,
                f"文体が混在しています。この文は{REGISTER_LABELS[h.key]}ですが、"
                f"文書では{REGISTER_LABELS[dominant]}が主に使われています",
                suggestions=[f"文末を「{REGISTER_ENDINGS[dominant]}」に統一してください"],
                data={"dominant": dominant},
            ))
        return out


__all__ = [
    "CommaCountRule",
    "LongSentenceRule",
    "MonotonousEndingRule",
    "PassiveOveruseRule",
    "MissingSubjectRule",
    "ConjunctionRepetitionRule",
    "AdversativeGaRule",
    "AmbiguousDemonstrativeRule",
    "StyleConsistencyRule",
    "sentence_ending",
    "sentence_register",
    "split_suggestion",
    "leading_conjunction",
    "adversative_ga",
    "is_passive_marker",
]
