import dataclasses

import pytest

from japroof.config import DEFAULT_CONFIG
from japroof.errors import AppError, ErrorCode
from japroof.lookup import TermSummary
from japroof.models import Token
from japroof.pipeline import run_rule as execute
from japroof.rules.terms import TermNotationRule, active_terms


def test_builtin_dictionaries(run_rule):
    text = "javascriptとGithubを使う。"
    diags = run_rule(TermNotationRule(), text)
    assert [d.suggestions for d in diags] == [("JavaScript",), ("GitHub",)]


def test_word_boundary_is_respected(run_rule):
    assert run_rule(TermNotationRule(), "awsome な設定") == []


def test_dictionary_toggles(run_rule):
    text = "javascriptとawsを使う。"
    diags = run_rule(TermNotationRule(), text, enable_web_tech_dictionary=False)
    assert [d.suggestions for d in diags] == [("AWS",)]


def test_custom_notation_rules(run_rule):
    text = "ウェブサイトを公開する。"
    diags = run_rule(TermNotationRule(), text, custom_notation_rules={"ウェブサイト": "Webサイト"})
    assert [d.suggestions for d in diags] == [("Webサイト",)]


def test_active_terms_drops_identity_entries():
    cfg = dataclasses.replace(DEFAULT_CONFIG, custom_notation_rules={"React": "React"})
    assert "React" not in active_terms(cfg)


class FakeLookup:
    def __init__(self, titles=None, error=None):
        self.titles = titles or {}
        self.error = error
        self.calls = []

    def get_summary(self, term):
        self.calls.append(term)
        if self.error is not None:
            raise self.error
        title = self.titles.get(term)
        return TermSummary(title=title, extract="") if title else None


def _proper_noun_tokens(text, surface):
    start = text.index(surface)
    return [
        Token(surface=surface, pos="名詞", pos_detail1="固有名詞", start=start, end=start + len(surface)),
        Token(surface=text[start + len(surface):], pos="名詞", start=start + len(surface), end=len(text)),
    ]


def test_lookup_suggests_official_title(run_rule):
    text = "kubernetesで動かす"
    tokens = _proper_noun_tokens(text, "kubernetes")
    lookup = FakeLookup({"kubernetes": "Kubernetes"})
    diags = run_rule(TermNotationRule(lookup=lookup), text, tokens)
    assert [d.suggestions for d in diags] == [("Kubernetes",)]
    assert lookup.calls == ["kubernetes"]


def test_lookup_ignores_dissimilar_titles(run_rule):
    text = "kubectlで動かす"
    tokens = _proper_noun_tokens(text, "kubectl")
    lookup = FakeLookup({"kubectl": "Kubernetes"})
    assert run_rule(TermNotationRule(lookup=lookup), text, tokens) == []


def test_lookup_failure_fails_the_rule(context):
    text = "kubernetesで動かす"
    tokens = _proper_noun_tokens(text, "kubernetes")
    lookup = FakeLookup(error=AppError(ErrorCode.WIKIPEDIA_TIMEOUT, "timeout"))
    res = execute(TermNotationRule(lookup=lookup), tokens, context(text, tokens))
    assert not res.success
    assert res.diagnostics == []
    assert isinstance(res.error, AppError)
    assert res.error.code is ErrorCode.WIKIPEDIA_TIMEOUT


def test_lookup_failure_propagates_from_check(context):
    text = "kubernetesで動かす"
    tokens = _proper_noun_tokens(text, "kubernetes")
    lookup = FakeLookup(error=AppError(ErrorCode.WIKIPEDIA_RATE_LIMIT, "slow down"))
    with pytest.raises(AppError):
        TermNotationRule(lookup=lookup).check(tokens, context(text, tokens))
