"""トークン窓(n-gram)で検出するルール。

ら抜き言葉、二重否定、助詞の重複、「の」の連続、名詞の連続、サ変動詞、副詞の呼応。
いずれも文ごとにトークン列を左から走査し、一致した窓の範囲を診断とする。
"""
from __future__ import annotations
import re
from typing import Dict, List, Sequence, Tuple

from ..detection import find_token_phrases, scan_token_windows
from ..models import (
    AdvancedDiagnostic,
    Severity,
    Token,
    is_noun,
    is_particle,
    is_terminal,
    is_verb,
    strip_terminals,
)
from .base import BaseRule, RuleContext

# ---------------------------------------------------------------------------
# ら抜き言葉

RA_NUKI_FORMS: Dict[str, str] = {
    "食べれる": "食べられる",
    "食べれた": "食べられた",
    "食べれない": "食べられない",
    "食べれます": "食べられます",
    "食べれません": "食べられません",
    "見れる": "見られる",
    "見れた": "見られた",
    "見れない": "見られない",
    "見れます": "見られます",
    "見れません": "見られません",
    "来れる": "来られる",
    "来れた": "来られた",
    "来れない": "来られない",
    "来れます": "来られます",
    "これる": "こられる",
    "これない": "こられない",
    "起きれる": "起きられる",
    "起きれた": "起きられた",
    "起きれない": "起きられない",
    "起きれます": "起きられます",
    "考えれる": "考えられる",
    "考えれた": "考えられた",
    "考えれない": "考えられない",
    "考えれます": "考えられます",
    "出れる": "出られる",
    "出れた": "出られた",
    "出れない": "出られない",
    "寝れる": "寝られる",
    "寝れた": "寝られた",
    "寝れない": "寝られない",
    "着れる": "着られる",
    "着れた": "着られた",
    "着れない": "着られない",
    "居れる": "居られる",
    "信じれる": "信じられる",
    "信じれた": "信じられた",
    "感じれる": "感じられる",
    "感じれた": "感じられた",
    "落ちれる": "落ちられる",
    "生きれる": "生きられる",
    "生きれた": "生きられた",
    "降りれる": "降りられる",
    "降りれた": "降りられた",
    "始めれる": "始められる",
    "決めれる": "決められる",
    "変えれる": "変えられる",
    "止めれる": "止められる",
    "覚えれる": "覚えられる",
    "教えれる": "教えられる",
    "逃げれる": "逃げられる",
    "開けれる": "開けられる",
    "閉めれる": "閉められる",
}

# 一段動詞の語幹(え段・い段で終わる)+「れ」+語尾
_RA_NUKI_RE = re.compile(
    r"^(.+[えけげせぜてでねへべぺめれいきぎしじちぢにひびぴみり])れ(る|た|ない|ます|ません)$"
)

# 語幹がい段・え段+「れ」で終わる本来の一段動詞
NOT_RA_NUKI = frozenset({"あきれ", "しびれ", "まぎれ", "ちぎれ", "とぎれ", "くたびれ"})


def _ichidan_like(conjugation: str) -> bool:
    return "一段" in conjugation or "カ変" in conjugation or "カ行変格" in conjugation


def ra_nuki_correction(token: Token) -> str | None:
    """1トークンがら抜き言葉なら正しい形を返す。"""
    if token.surface in RA_NUKI_FORMS:
        return RA_NUKI_FORMS[token.surface]
    if not is_verb(token) or "五段" in token.conjugation:
        return None
    m = _RA_NUKI_RE.match(token.surface)
    if m and m.group(1) + "れ" not in NOT_RA_NUKI:
        return f"{m.group(1)}られ{m.group(2)}"
    return None


def _split_ra_nuki(first: Token, second: Token) -> bool:
    # 食べ(一段・未然形) + れる
    if not is_verb(first) or not _ichidan_like(first.conjugation):
        return False
    if second.pos not in ("動詞", "助動詞") or not second.surface.startswith("れ"):
        return False
    return second.base_form in ("れる", "") and first.end == second.start


class RaNukiRule(BaseRule):
    name = "ra-nuki-detection"
    description = "ら抜き言葉を検出します"
    code = "ra-nuki"
    config_flag = "enable_ra_nuki"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        out: List[AdvancedDiagnostic] = []
        i = 0
        n = len(tokens)
        while i < n:
            tok = tokens[i]
            fixed = ra_nuki_correction(tok)
            if fixed:
                out.append(self._report(context, tok.start, tok.end, tok.surface, fixed))
                i += 1
                continue
            if i + 1 < n and _split_ra_nuki(tok, tokens[i + 1]):
                nxt = tokens[i + 1]
                wrong = tok.surface + nxt.surface
                fixed = tok.surface + "られ" + nxt.surface[1:]
                out.append(self._report(context, tok.start, nxt.end, wrong, fixed))
                i += 2
                continue
            i += 1
        return out

    def _report(self, context, start, end, wrong, fixed):
        return self.diagnostic(
            context, start, end,
            f"ら抜き言葉「{wrong}」が使われています。「{fixed}」が正しい形です",
            suggestions=[fixed],
        )


# ---------------------------------------------------------------------------
# 二重否定

DOUBLE_NEGATIONS: Dict[str, Tuple[str, ...]] = {
    "ないわけではない": ("ある", "する"),
    "ないことはない": ("ある", "できる"),
    "なくはない": ("ある",),
    "ないとは言えない": ("あり得る", "可能性がある"),
    "ないではいられない": ("せずにはいられない",),
    "ずにはいられない": (),
    "ないとも限らない": ("あり得る", "可能性がある"),
    "ないでもない": (),
}


class DoubleNegationRule(BaseRule):
    name = "double-negation"
    description = "二重否定を検出します"
    code = "double-negation"
    config_flag = "enable_double_negation"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        out: List[AdvancedDiagnostic] = []
        for sentence in context.sentences:
            for first, last, phrase in find_token_phrases(sentence.tokens, DOUBLE_NEGATIONS):
                toks = sentence.tokens
                out.append(self.diagnostic(
                    context, toks[first].start, toks[last].end,
                    f"二重否定「{phrase}」は意味が分かりにくくなります。肯定表現への書き換えを検討してください",
                    suggestions=DOUBLE_NEGATIONS[phrase],
                ))
        return out


# ---------------------------------------------------------------------------
# 助詞の重複(既定は無効)

class ParticleRepetitionRule(BaseRule):
    name = "particle-repetition"
    description = "同じ助詞の重複使用を検出します"
    code = "particle-repetition"
    config_flag = "enable_particle_repetition"
    severity = Severity.INFORMATION

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        out: List[AdvancedDiagnostic] = []
        for sentence in context.sentences:
            seen: Dict[str, List[Token]] = {}
            for tok in sentence.tokens:
                # 「の」は no-particle-chain で扱う
                if is_particle(tok) and tok.surface != "の":
                    seen.setdefault(tok.surface, []).append(tok)
            for surface, hits in seen.items():
                if len(hits) < 2:
                    continue
                out.append(self.diagnostic(
                    context, hits[0].start, hits[-1].end,
                    f"助詞「{surface}」が1文に{len(hits)}回使われています",
                    data={"count": len(hits)},
                ))
        out.sort(key=lambda d: (d.start, d.end))
        return out


# ---------------------------------------------------------------------------
# 「の」の連続

NO_CHAIN_MAX_GAP = 3


class NoParticleChainRule(BaseRule):
    name = "no-particle-chain"
    description = "助詞「の」の連続使用を検出します"
    code = "no-particle-chain"
    config_flag = "enable_no_particle_chain"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        threshold = context.config.no_particle_chain_threshold
        out: List[AdvancedDiagnostic] = []
        for sentence in context.sentences:
            toks = sentence.tokens
            positions = [i for i, t in enumerate(toks) if t.surface == "の" and is_particle(t)]
            for chain in self._chains(toks, positions):
                if len(chain) < threshold:
                    continue
                first = max(chain[0] - 1, 0)
                last = min(chain[-1] + 1, len(toks) - 1)
                out.append(self.diagnostic(
                    context, toks[first].start, toks[last].end,
                    f"助詞「の」が{len(chain)}回連続しています。言い換えや語順の変更を検討してください",
                    data={"chain_length": len(chain), "threshold": threshold},
                ))
        return out

    @staticmethod
    def _chains(toks: Sequence[Token], positions: List[int]) -> List[List[int]]:
        chains: List[List[int]] = []
        current: List[int] = []
        for pos in positions:
            if current:
                between = toks[current[-1] + 1:pos]
                broken = len(between) > NO_CHAIN_MAX_GAP or any(
                    is_terminal(t) or t.surface in ("、", "，") for t in between
                )
                if broken:
                    chains.append(current)
                    current = []
            current.append(pos)
        if current:
            chains.append(current)
        return chains


# ---------------------------------------------------------------------------
# 名詞の連続

class NounChainRule(BaseRule):
    name = "noun-chain"
    description = "名詞の過度な連続を検出します"
    code = "noun-chain"
    config_flag = "enable_noun_chain"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        threshold = context.config.noun_chain_threshold
        out: List[AdvancedDiagnostic] = []
        for sentence in context.sentences:
            toks = sentence.tokens
            i = 0
            while i < len(toks):
                if not is_noun(toks[i]):
                    i += 1
                    continue
                j = i
                while j + 1 < len(toks) and is_noun(toks[j + 1]):
                    j += 1
                length = j - i + 1
                if length >= threshold:
                    span = context.document_text[toks[i].start:toks[j].end]
                    out.append(self.diagnostic(
                        context, toks[i].start, toks[j].end,
                        f"名詞が{length}個連続しています(「{span}」)。助詞を補って読みやすくしてください",
                        data={"chain_length": length, "threshold": threshold},
                    ))
                i = j + 1
        return out


# ---------------------------------------------------------------------------
# サ変動詞「〜をする」

def _is_sahen_noun(tok: Token) -> bool:
    return is_noun(tok) and (tok.pos_detail1 == "サ変接続" or tok.pos_detail2 == "サ変可能")


def _is_sahen_window(window: Sequence[Token]) -> bool:
    noun, particle, verb = window
    return (
        _is_sahen_noun(noun)
        and is_particle(particle) and particle.surface == "を"
        and is_verb(verb) and verb.base_form == "する"
    )


class SahenVerbRule(BaseRule):
    name = "sahen-verb"
    description = "サ変動詞の「〜をする」パターンを検出します"
    code = "sahen-verb"
    config_flag = "enable_sahen_verb"
    severity = Severity.INFORMATION

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        out: List[AdvancedDiagnostic] = []
        for sentence in context.sentences:
            toks = sentence.tokens
            for first, last in scan_token_windows(toks, 3, _is_sahen_window):
                noun, _, verb = toks[first:last + 1]
                wrong = "".join(t.surface for t in toks[first:last + 1])
                fixed = noun.surface + verb.surface
                out.append(self.diagnostic(
                    context, noun.start, verb.end,
                    f"「{wrong}」は「{fixed}」と簡潔に書けます",
                    suggestions=[fixed],
                ))
        return out


# ---------------------------------------------------------------------------
# 副詞の呼応

# 副詞: (呼応すべき語尾, 避けるべき文末, 正しい例)
ADVERB_AGREEMENTS: Dict[str, Tuple[Tuple[str, ...], Tuple[str, ...], str]] = {
    "決して": (("ない", "ません", "なかった", "ませんでした"), ("ます", "です", "る", "た"), "決して行きません"),
    "全く": (("ない", "ません", "なかった", "ませんでした"), ("ます",), "全く分かりません"),
    "必ずしも": (("ない", "ません", "とは限らない", "わけではない"), ("ます", "です"), "必ずしも正しいとは限らない"),
    "たぶん": (("だろう", "でしょう", "かもしれない", "と思う"), ("ません",), "たぶん行くでしょう"),
    "おそらく": (("だろう", "でしょう", "かもしれない", "と思われる"), ("ません",), "おそらく正しいでしょう"),
    "もし": (("なら", "たら", "れば", "ば", "と"), (), "もし晴れたら行きます"),
}


class AdverbAgreementRule(BaseRule):
    name = "adverb-agreement"
    description = "副詞と述語の呼応の誤りを検出します"
    code = "adverb-agreement"
    config_flag = "enable_adverb_agreement"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        out: List[AdvancedDiagnostic] = []
        for sentence in context.sentences:
            body = strip_terminals(sentence.text)
            body_end = sentence.start + len(body)
            for tok in sentence.tokens:
                rule = ADVERB_AGREEMENTS.get(tok.surface)
                if rule is None or tok.end >= body_end:
                    continue
                required, forbidden, example = rule
                rest = context.document_text[tok.end:body_end]
                if self._violates(tok.surface, rest, required, forbidden):
                    out.append(self.diagnostic(
                        context, tok.start, body_end,
                        f"副詞「{tok.surface}」は「{'」「'.join(required)}」などと呼応させてください(例: {example})",
                        suggestions=[example],
                    ))
                    break
        return out

    @staticmethod
    def _violates(adverb: str, rest: str, required, forbidden) -> bool:
        if any(r in rest for r in required):
            return False
        if adverb == "もし":
            return True
        return any(rest.endswith(f) for f in forbidden)


__all__ = [
    "RA_NUKI_FORMS",
    "DOUBLE_NEGATIONS",
    "ADVERB_AGREEMENTS",
    "ra_nuki_correction",
    "RaNukiRule",
    "DoubleNegationRule",
    "ParticleRepetitionRule",
    "NoParticleChainRule",
    "NounChainRule",
    "SahenVerbRule",
    "AdverbAgreementRule",
]
