"""高度ルール群。

default_rules() は登録順が固定されたルールのタプルを返す。
実行順と診断の並び順はこの登録順に従う。
"""
from __future__ import annotations
from typing import Optional, Tuple

from .base import BaseRule, Rule, RuleContext
from .consistency import (
    AlphabetWidthRule,
    BracketQuoteMismatchRule,
    DashTildeNormalizationRule,
    DateFormatVariantRule,
    HalfwidthKanaRule,
    NakaguroUsageRule,
    NumberWidthMixRule,
    NumeralStyleMixRule,
    SpaceAroundUnitRule,
    SymbolWidthMixRule,
)
from .dictionary import (
    ConjunctionMisuseRule,
    HomophoneRule,
    HonorificErrorRule,
    KanjiOpeningRule,
    KatakanaChouonRule,
    ModifierPositionRule,
    OkuriganaVariantRule,
    OrthographyVariantRule,
    RedundantExpressionRule,
    TautologyRule,
    TwistedSentenceRule,
    WeakExpressionRule,
)
from .sentence import (
    AdversativeGaRule,
    AmbiguousDemonstrativeRule,
    CommaCountRule,
    ConjunctionRepetitionRule,
    LongSentenceRule,
    MissingSubjectRule,
    MonotonousEndingRule,
    PassiveOveruseRule,
    StyleConsistencyRule,
)
from .terms import TermLookup, TermNotationRule
from .window import (
    AdverbAgreementRule,
    DoubleNegationRule,
    NoParticleChainRule,
    NounChainRule,
    ParticleRepetitionRule,
    RaNukiRule,
    SahenVerbRule,
)


def default_rules(lookup: Optional[TermLookup] = None) -> Tuple[Rule, ...]:
    """全ルールを登録順に生成する。lookup は用語表記ルールに渡す。"""
    return (
        StyleConsistencyRule(),
        RaNukiRule(),
        DoubleNegationRule(),
        ParticleRepetitionRule(),
        ConjunctionRepetitionRule(),
        AdversativeGaRule(),
        AlphabetWidthRule(),
        WeakExpressionRule(),
        CommaCountRule(),
        TermNotationRule(lookup=lookup),
        KanjiOpeningRule(),
        RedundantExpressionRule(),
        TautologyRule(),
        NoParticleChainRule(),
        MonotonousEndingRule(),
        LongSentenceRule(),
        SahenVerbRule(),
        MissingSubjectRule(),
        TwistedSentenceRule(),
        HomophoneRule(),
        HonorificErrorRule(),
        AdverbAgreementRule(),
        ModifierPositionRule(),
        AmbiguousDemonstrativeRule(),
        PassiveOveruseRule(),
        NounChainRule(),
        ConjunctionMisuseRule(),
        OkuriganaVariantRule(),
        OrthographyVariantRule(),
        KatakanaChouonRule(),
        NumberWidthMixRule(),
        HalfwidthKanaRule(),
        NumeralStyleMixRule(),
        SpaceAroundUnitRule(),
        BracketQuoteMismatchRule(),
        DateFormatVariantRule(),
        DashTildeNormalizationRule(),
        NakaguroUsageRule(),
        SymbolWidthMixRule(),
    )


__all__ = [
    "BaseRule",
    "Rule",
    "RuleContext",
    "TermLookup",
    "default_rules",
]
