from japroof.models import Severity
from japroof.rules.dictionary import (
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
    katakana_to_hiragana,
)


def _spans(text, diags):
    return [text[d.start:d.end] for d in diags]


def test_weak_expression_normal(run_rule):
    text = "雨が降るかもしれない。良いと思う。"
    diags = run_rule(WeakExpressionRule(), text)
    assert _spans(text, diags) == ["かもしれない"]
    assert diags[0].severity is Severity.INFORMATION
    assert diags[0].suggestions == ("可能性がある",)


def test_weak_expression_strict(run_rule):
    text = "良いと思う。"
    diags = run_rule(WeakExpressionRule(), text, weak_expression_level="strict")
    assert _spans(text, diags) == ["と思う"]
    assert diags[0].severity is Severity.WARNING


def test_weak_expression_loose(run_rule):
    text = "たぶん雨だ。かもしれない。"
    diags = run_rule(WeakExpressionRule(), text, weak_expression_level="loose")
    assert _spans(text, diags) == ["たぶん"]
    assert diags[0].severity is Severity.HINT


def test_kanji_opening_literal(run_rule):
    text = "確認して下さい。"
    diags = run_rule(KanjiOpeningRule(), text)
    assert _spans(text, diags) == ["下さい"]
    assert diags[0].suggestions == ("ください",)


def test_kanji_opening_checks_part_of_speech(run_rule, build):
    text = "更に進める。"
    adverb = build(text, [("更に", "副詞"), ("進める", "動詞"), ("。", "記号")])
    diags = run_rule(KanjiOpeningRule(), text, adverb)
    assert [d.suggestions for d in diags] == [("さらに",)]
    noun = build(text, [("更に", "名詞"), ("進める", "動詞"), ("。", "記号")])
    assert run_rule(KanjiOpeningRule(), text, noun) == []


def test_redundant_expression(run_rule):
    text = "説明することができる。"
    diags = run_rule(RedundantExpressionRule(), text)
    assert _spans(text, diags) == ["することができる"]
    assert diags[0].suggestions == ("できる",)


def test_tautology(run_rule):
    text = "まず最初に説明します。"
    diags = run_rule(TautologyRule(), text)
    assert len(diags) == 1
    assert diags[0].code == "tautology"
    assert diags[0].suggestions == ("最初に", "まず")


def test_twisted_sentence_fixed_phrase(run_rule):
    text = "私の夢は医者になりたいです。"
    diags = run_rule(TwistedSentenceRule(), text)
    assert len(diags) == 1
    assert diags[0].suggestions == ("私の夢は医者になることです",)


def test_twisted_sentence_pattern(run_rule):
    text = "僕の目標はプロになりたいです。"
    diags = run_rule(TwistedSentenceRule(), text)
    assert _spans(text, diags) == ["目標はプロになりたいです"]


def test_homophone(run_rule):
    diags = run_rule(HomophoneRule(), "対象的な結果になった。")
    assert [d.suggestions for d in diags] == [("対照的",)]


def test_double_honorific(run_rule):
    text = "先生がご覧になられました。"
    diags = run_rule(HonorificErrorRule(), text)
    assert _spans(text, diags) == ["ご覧になられました"]
    assert diags[0].suggestions == ("ご覧になりました",)
    assert "二重敬語" in diags[0].message


def test_humble_form_misuse(run_rule):
    diags = run_rule(HonorificErrorRule(), "お客様が資料を拝見されました。")
    assert [d.suggestions for d in diags] == [("ご覧になりました",)]
    assert "謙譲語" in diags[0].message


def test_modifier_position(run_rule):
    diags = run_rule(ModifierPositionRule(), "赤い大きな車。")
    assert [d.suggestions for d in diags] == [("大きな赤い",)]
    assert diags[0].severity is Severity.INFORMATION


def test_conjunction_misuse(run_rule):
    diags = run_rule(ConjunctionMisuseRule(), "晴れた。しかし、外出した。")
    assert [d.suggestions for d in diags] == [("晴れた。そこで、外出した",)]


def test_okurigana_variant(run_rule):
    text = "会議を行なう。"
    diags = run_rule(OkuriganaVariantRule(), text)
    assert _spans(text, diags) == ["行なう"]
    assert diags[0].suggestions == ("行う",)


def test_orthography_variant(run_rule):
    text = "問題が無い。ここ迄です。"
    diags = run_rule(OrthographyVariantRule(), text)
    assert [d.suggestions for d in diags] == [("ない",), ("まで",)]


def test_orthography_single_kanji_inside_compound(run_rule):
    assert run_rule(OrthographyVariantRule(), "三時迄待つ。") == []


def test_orthography_auxiliary_verb(run_rule, build):
    text = "試して見る。"
    tokens = build(text, [
        ("試し", "動詞"), ("て", "助詞"), ("見る", "動詞", {"base_form": "見る", "reading": "ミル"}), ("。", "記号"),
    ])
    diags = run_rule(OrthographyVariantRule(), text, tokens)
    assert _spans(text, diags) == ["見る"]
    assert diags[0].suggestions == ("みる",)


def test_orthography_main_verb_is_kept(run_rule, build):
    text = "映画を見る。"
    tokens = build(text, [
        "映画", ("を", "助詞"), ("見る", "動詞", {"base_form": "見る", "reading": "ミル"}), ("。", "記号"),
    ])
    assert run_rule(OrthographyVariantRule(), text, tokens) == []


def test_katakana_chouon(run_rule):
    text = "サーバを再起動する。"
    diags = run_rule(KatakanaChouonRule(), text)
    assert [d.suggestions for d in diags] == [("サーバー",)]
    assert run_rule(KatakanaChouonRule(), "サーバーを再起動する。") == []
    assert run_rule(KatakanaChouonRule(), "サーバントを呼ぶ。") == []


def test_katakana_to_hiragana():
    assert katakana_to_hiragana("ミル") == "みる"
    assert katakana_to_hiragana("ー") == "ー"
