import json

import pytest

from japroof import cli


@pytest.fixture
def fake_morph(monkeypatch, rough):
    class FakeTokenizer:
        def __call__(self, text):
            return rough(text)

    monkeypatch.setattr(cli, "Tokenizer", FakeTokenizer)
    monkeypatch.setattr(cli, "morph_available", lambda: True)


@pytest.fixture
def doc(tmp_path):
    p = tmp_path / "doc.md"
    p.write_text("前書き。\nまず最初に説明します。\n", encoding="utf-8")
    return p


def test_text_output(fake_morph, doc, capsys):
    assert cli.main([str(doc)]) == 0
    out = capsys.readouterr().out
    assert ":2:1: [warning]" in out
    assert "rule: tautology" in out
    assert "suggest: 最初に, まず" in out
    assert out.strip().endswith("Total: 1 issue(s)")


def test_json_output(fake_morph, doc, capsys):
    assert cli.main([str(doc), "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert [d["code"] for d in data] == ["tautology"]
    assert data[0]["file"].endswith("doc.md")
    assert data[0]["range"]["start"] == {"line": 1, "character": 0}


def test_fail_on_issue(fake_morph, doc):
    assert cli.main([str(doc), "--fail-on-issue"]) == 1


def test_disable_rule(fake_morph, doc, capsys):
    assert cli.main([str(doc), "--disable", "tautology", "--fail-on-issue"]) == 0
    assert "No issues found." in capsys.readouterr().out


def test_min_severity(fake_morph, doc, capsys):
    assert cli.main([str(doc), "--min-severity", "error"]) == 0
    assert "No issues found." in capsys.readouterr().out


def test_unknown_rule(fake_morph, doc, capsys):
    assert cli.main([str(doc), "--enable", "no-such-rule"]) == 2
    assert "unknown rule" in capsys.readouterr().err


def test_custom_rules_file(fake_morph, tmp_path, capsys):
    rules = tmp_path / "rules.yaml"
    rules.write_text("ウェブサイト: Webサイト\n", encoding="utf-8")
    target = tmp_path / "page.md"
    target.write_text("ウェブサイトを公開する。\n", encoding="utf-8")
    assert cli.main([str(target), "--rules", str(rules), "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert [(d["code"], d["suggestions"]) for d in data] == [("term-notation", ["Webサイト"])]


def test_config_file(fake_morph, doc, tmp_path, capsys):
    cfg = tmp_path / "pyproject.toml"
    cfg.write_text("[tool.japroof]\nenable_tautology = false\n", encoding="utf-8")
    assert cli.main([str(doc), "--config", str(cfg)]) == 0
    assert "No issues found." in capsys.readouterr().out


def test_bad_config_file(fake_morph, doc, tmp_path, capsys):
    cfg = tmp_path / "pyproject.toml"
    cfg.write_text("[tool.japroof]\ncomma_count_threshold = -1\n", encoding="utf-8")
    assert cli.main([str(doc), "--config", str(cfg)]) == 2
    assert "failed to load config" in capsys.readouterr().err


def test_directory_and_jobs(fake_morph, doc, tmp_path, capsys):
    (tmp_path / "other.py").write_text('print("まず最初に")\n', encoding="utf-8")
    assert cli.main([str(tmp_path), "--jobs", "2", "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert sorted(d["file"].rsplit("/", 1)[-1].rsplit("\\", 1)[-1] for d in data) == ["doc.md", "other.py"]


def test_missing_analyzer(monkeypatch, doc, capsys):
    monkeypatch.setattr(cli, "morph_available", lambda: False)
    assert cli.main([str(doc)]) == 2
    assert "janome" in capsys.readouterr().err
