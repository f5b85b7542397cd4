import dataclasses

import pytest

from japroof import analyze_text
from japroof.config import DEFAULT_CONFIG
from japroof.errors import AppError, ErrorCode, ErrorHandler
from japroof.models import Token
from japroof.session import AnalysisSession, DocumentVersions, should_analyze

TEXT = "まず最初に説明します。"


class CountingTokenizer:
    def __init__(self, split, result=None):
        self.split = split
        self.calls = 0
        self.result = result

    def __call__(self, text):
        self.calls += 1
        return self.split(text) if self.result is None else self.result


@pytest.fixture
def tokenizer(rough):
    return CountingTokenizer(rough)


def _codes(analysis):
    return [d.code for d in analysis.diagnostics]


def test_analyze_plain_text(tokenizer):
    session = AnalysisSession(tokenizer=tokenizer)
    analysis = session.analyze("file:///a.md", 3, TEXT, language_id="markdown")
    assert not analysis.failed
    assert analysis.version == 3
    assert "tautology" in _codes(analysis)
    assert [r.rule_name for r in analysis.rule_results][0] == "style-consistency"


def test_analyze_bytes_are_decoded(tokenizer):
    session = AnalysisSession(tokenizer=tokenizer)
    analysis = session.analyze("file:///a.txt", 1, TEXT.encode("utf-8"))
    assert "tautology" in _codes(analysis)


def test_blank_text_is_an_empty_success(tokenizer):
    analysis = AnalysisSession(tokenizer=tokenizer).analyze("file:///a.md", 1, "  \n ", language_id="markdown")
    assert not analysis.failed
    assert analysis.diagnostics == ()
    assert tokenizer.calls == 0


def test_empty_tokens_for_text_is_a_parse_error(rough):
    analysis = AnalysisSession(tokenizer=CountingTokenizer(rough, result=[])).analyze("file:///a.md", 1, TEXT, "markdown")
    assert analysis.failed
    assert analysis.error.code is ErrorCode.ANALYZER_PARSE_ERROR
    assert analysis.diagnostics == ()


def test_overlapping_tokens_are_a_parse_error(tokenizer):
    bad = [Token("まず", "副詞", 0, 2), Token("ず最", "名詞", 1, 3)]
    analysis = AnalysisSession(tokenizer=tokenizer).analyze("file:///a.md", 1, TEXT, "markdown", tokens=bad)
    assert analysis.error.code is ErrorCode.ANALYZER_PARSE_ERROR


def test_tokenizer_exception_is_a_parse_error():
    def broken(text):
        raise RuntimeError("segfault")

    analysis = AnalysisSession(tokenizer=broken).analyze("file:///a.md", 1, TEXT, "markdown")
    assert analysis.error.code is ErrorCode.ANALYZER_PARSE_ERROR


def test_too_long_document(tokenizer):
    config = dataclasses.replace(DEFAULT_CONFIG, max_document_length=5)
    analysis = AnalysisSession(tokenizer=tokenizer, config=config).analyze("file:///a.md", 1, TEXT)
    assert analysis.error.code is ErrorCode.FILE_TOO_LARGE


def test_undecodable_bytes(tokenizer):
    analysis = AnalysisSession(tokenizer=tokenizer).analyze("file:///a.txt", 1, b"\x81")
    assert analysis.failed
    assert analysis.error.code is ErrorCode.ENCODING_ERROR


def test_errors_reach_the_handler(tokenizer):
    seen = []
    handler = ErrorHandler(notifier=lambda err, hint: seen.append((err.code, hint)))
    session = AnalysisSession(tokenizer=tokenizer, error_handler=handler)
    session.analyze("file:///a.md", 1, "x" * (DEFAULT_CONFIG.max_document_length + 1))
    assert seen and seen[0][0] is ErrorCode.FILE_TOO_LARGE


def test_lookup_failure_only_fails_term_notation():
    class Failing:
        def get_summary(self, term):
            raise AppError(ErrorCode.WIKIPEDIA_RATE_LIMIT, "slow down")

    text = "kubernetesとまず最初に"
    tokens = [
        Token("kubernetes", "名詞", 0, 10, pos_detail1="固有名詞"),
        Token("とまず最初に", "名詞", 10, 16),
    ]
    seen = []
    handler = ErrorHandler(notifier=lambda err, hint: seen.append(err.code))
    session = AnalysisSession(lookup=Failing(), error_handler=handler)
    analysis = session.analyze("file:///a.md", 1, text, "markdown", tokens=tokens)
    assert not analysis.failed
    failed = [r for r in analysis.rule_results if not r.success]
    assert [r.rule_name for r in failed] == ["term-notation"]
    assert "tautology" in _codes(analysis)
    assert seen == [ErrorCode.WIKIPEDIA_RATE_LIMIT]


def test_document_filter():
    cfg = DEFAULT_CONFIG
    assert should_analyze("file:///a.md", "markdown", "english only", cfg)
    assert should_analyze("file:///a.py", "python", "# 日本語のコメント", cfg)
    assert not should_analyze("file:///a.py", "python", "# english", cfg)
    assert not should_analyze("untitled:1", "plaintext", TEXT, dataclasses.replace(cfg, enable_untitled_files=False))
    assert not should_analyze("file:///a.md", "markdown", TEXT, dataclasses.replace(cfg, excluded_language_ids=("markdown",)))
    no_content = dataclasses.replace(cfg, enable_content_based_detection=False)
    assert not should_analyze("file:///a.py", "python", "# 日本語", no_content)


def test_skipped_documents_do_not_tokenize(tokenizer):
    analysis = AnalysisSession(tokenizer=tokenizer).analyze("file:///a.py", 1, "x = 1  # english\n", "python")
    assert analysis.diagnostics == ()
    assert not analysis.failed
    assert tokenizer.calls == 0


def test_code_is_masked_before_analysis(tokenizer):
    source = 'x = "まず最初に"  # ＡＰＩとAPIとSDK\n'
    analysis = AnalysisSession(tokenizer=tokenizer).analyze("file:///a.py", 1, source, "python")
    found = {d.code: source[d.start:d.end] for d in analysis.diagnostics}
    assert found["tautology"] == "まず最初に"
    assert found["alphabet-width"] == "ＡＰＩ"


def test_update_config_applies_to_later_runs(tokenizer):
    session = AnalysisSession(tokenizer=tokenizer)
    assert "tautology" in _codes(session.analyze("file:///a.md", 1, TEXT, "markdown"))
    session.update_config(dataclasses.replace(DEFAULT_CONFIG, enable_tautology=False))
    assert "tautology" not in _codes(session.analyze("file:///a.md", 2, TEXT, "markdown"))


def test_document_versions(tokenizer):
    versions = DocumentVersions()
    assert versions.bump("file:///a.md") == 1
    assert versions.bump("file:///a.md") == 2
    session = AnalysisSession(tokenizer=tokenizer)
    old = session.analyze("file:///a.md", 1, TEXT, "markdown")
    assert not versions.is_current(old)
    versions.set("file:///a.md", 1)
    assert versions.is_current(old)
    versions.forget("file:///a.md")
    assert versions.latest("file:///a.md") == 0


def test_submit_runs_in_background(tokenizer):
    with AnalysisSession(tokenizer=tokenizer, workers=2) as session:
        futures = [session.submit(f"file:///{i}.md", i, TEXT, "markdown") for i in range(3)]
        results = [f.result() for f in futures]
    assert [r.version for r in results] == [0, 1, 2]
    assert all("tautology" in _codes(r) for r in results)


def test_analyze_text_with_tokens(rough):
    analysis = analyze_text(TEXT, tokens=rough(TEXT))
    assert analysis.uri == "untitled:memory"
    assert "tautology" in _codes(analysis)
