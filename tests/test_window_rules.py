import pytest

from japroof.config import DEFAULT_CONFIG
from japroof.models import Severity
from japroof.rules.window import (
    AdverbAgreementRule,
    DoubleNegationRule,
    NoParticleChainRule,
    NounChainRule,
    ParticleRepetitionRule,
    RaNukiRule,
    SahenVerbRule,
    ra_nuki_correction,
)


def test_ranuki_single_token(run_rule, build):
    text = "朝ごはんが食べれる。"
    tokens = build(text, [
        "朝ごはん", ("が", "助詞"), ("食べれる", "動詞", {"conjugation": "一段"}), ("。", "記号"),
    ])
    diags = run_rule(RaNukiRule(), text, tokens)
    assert len(diags) == 1
    d = diags[0]
    assert d.code == "ra-nuki"
    assert d.rule_name == "ra-nuki-detection"
    assert (d.start, d.end) == (5, 9)
    assert d.suggestions == ("食べられる",)


def test_ranuki_split_tokens(run_rule, build):
    text = "これなら起きれる。"
    tokens = build(text, [
        "これ", ("なら", "助動詞"),
        ("起き", "動詞", {"conjugation": "一段", "conjugation_form": "未然形", "base_form": "起きる"}),
        ("れる", "動詞", {"base_form": "れる"}),
        ("。", "記号"),
    ])
    diags = run_rule(RaNukiRule(), text, tokens)
    assert [d.suggestions for d in diags] == [("起きられる",)]
    assert (diags[0].start, diags[0].end) == (4, 8)


def test_ranuki_ignores_potential_verbs(build):
    text = "走れる"
    (tok,) = build(text, [("走れる", "動詞", {"conjugation": "一段"})])
    assert ra_nuki_correction(tok) is None


@pytest.mark.parametrize("surface, fixed", [
    ("閉じれる", "閉じられる"),
    ("借りれる", "借りられる"),
    ("浴びれない", "浴びられない"),
    ("任せれます", "任せられます"),
    ("調べれた", "調べられた"),
])
def test_ranuki_single_token_outside_table(build, surface, fixed):
    (tok,) = build(surface, [(surface, "動詞", {"conjugation": "一段"})])
    assert ra_nuki_correction(tok) == fixed


@pytest.mark.parametrize("surface", ["いれる", "入れる", "あきれる", "くたびれる", "しびれた"])
def test_ranuki_ignores_plain_ichidan_verbs(build, surface):
    (tok,) = build(surface, [(surface, "動詞", {"conjugation": "一段"})])
    assert ra_nuki_correction(tok) is None


def test_double_negation(run_rule, build):
    text = "行かないわけではない。"
    tokens = build(text, [
        ("行か", "動詞"), ("ない", "助動詞"), "わけ", ("で", "助動詞"), ("は", "助詞"), ("ない", "助動詞"), ("。", "記号"),
    ])
    diags = run_rule(DoubleNegationRule(), text, tokens)
    assert len(diags) == 1
    assert text[diags[0].start:diags[0].end] == "ないわけではない"
    assert diags[0].suggestions == ("ある", "する")


def test_particle_repetition_is_disabled_by_default(run_rule, build):
    rule = ParticleRepetitionRule()
    assert not rule.is_enabled(DEFAULT_CONFIG)
    text = "私が彼が来た。"
    tokens = build(text, ["私", ("が", "助詞"), "彼", ("が", "助詞"), ("来", "動詞"), ("た", "助動詞"), ("。", "記号")])
    diags = run_rule(rule, text, tokens)
    assert [d.data["count"] for d in diags] == [2]
    assert diags[0].severity is Severity.INFORMATION


def test_no_particle_chain(run_rule, build):
    text = "東京の会社の部長の息子の友人です。"
    tokens = build(text, [
        "東京", ("の", "助詞"), "会社", ("の", "助詞"), "部長", ("の", "助詞"), "息子", ("の", "助詞"), "友人",
        ("です", "助動詞"), ("。", "記号"),
    ])
    diags = run_rule(NoParticleChainRule(), text, tokens)
    assert len(diags) == 1
    assert diags[0].data["chain_length"] == 4
    assert text[diags[0].start:diags[0].end] == "東京の会社の部長の息子の友人"


def test_no_particle_chain_below_threshold(run_rule, build):
    text = "東京の会社の部長です。"
    tokens = build(text, ["東京", ("の", "助詞"), "会社", ("の", "助詞"), "部長", ("です", "助動詞"), ("。", "記号")])
    assert run_rule(NoParticleChainRule(), text, tokens) == []


def test_noun_chain(run_rule, build):
    text = "情報処理技術者試験対策を行う。"
    tokens = build(text, ["情報", "処理", "技術", "者", "試験", "対策", ("を", "助詞"), ("行う", "動詞"), ("。", "記号")])
    diags = run_rule(NounChainRule(), text, tokens)
    assert len(diags) == 1
    assert dict(diags[0].data) == {"chain_length": 6, "threshold": 5}
    assert run_rule(NounChainRule(), text, tokens, noun_chain_threshold=7) == []


def test_sahen_verb(run_rule, build):
    text = "毎日勉強をする。"
    tokens = build(text, [
        "毎日", ("勉強", "名詞", {"pos_detail1": "サ変接続"}), ("を", "助詞"),
        ("する", "動詞", {"base_form": "する"}), ("。", "記号"),
    ])
    diags = run_rule(SahenVerbRule(), text, tokens)
    assert [d.suggestions for d in diags] == [("勉強する",)]
    assert text[diags[0].start:diags[0].end] == "勉強をする"


def test_sahen_verb_needs_sahen_noun(run_rule, build):
    text = "本をする。"
    tokens = build(text, ["本", ("を", "助詞"), ("する", "動詞", {"base_form": "する"}), ("。", "記号")])
    assert run_rule(SahenVerbRule(), text, tokens) == []


def test_adverb_agreement(run_rule, build):
    text = "決して行きます。"
    tokens = build(text, [("決して", "副詞"), ("行き", "動詞"), ("ます", "助動詞"), ("。", "記号")])
    diags = run_rule(AdverbAgreementRule(), text, tokens)
    assert len(diags) == 1
    assert diags[0].suggestions == ("決して行きません",)


def test_adverb_agreement_ok(run_rule, build):
    text = "決して行きません。"
    tokens = build(text, [("決して", "副詞"), ("行き", "動詞"), ("ませ", "助動詞"), ("ん", "助動詞"), ("。", "記号")])
    assert run_rule(AdverbAgreementRule(), text, tokens) == []
