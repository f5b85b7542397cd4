import json

import pytest

from japroof.external_rules import load_notation_file


def test_yaml_list(tmp_path):
    p = tmp_path / "rules.yaml"
    p.write_text('- pattern: "ウェブサイト"\n  suggestion: "Webサイト"\n- pattern: "E-mail"\n  suggestion: "メール"\n', encoding="utf-8")
    assert load_notation_file(str(p)) == {"ウェブサイト": "Webサイト", "E-mail": "メール"}


def test_json_mapping(tmp_path):
    p = tmp_path / "rules.json"
    p.write_text(json.dumps({"ウェブサイト": "Webサイト"}, ensure_ascii=False), encoding="utf-8")
    assert load_notation_file(str(p)) == {"ウェブサイト": "Webサイト"}


def test_utf16_json(tmp_path):
    # PowerShell の Set-Content 既定
    p = tmp_path / "rules.json"
    p.write_bytes(json.dumps([{"pattern": "テスト誤字", "suggestion": "テスト語"}], ensure_ascii=False).encode("utf-16"))
    assert load_notation_file(str(p)) == {"テスト誤字": "テスト語"}


def test_missing_suggestion(tmp_path):
    p = tmp_path / "rules.json"
    p.write_text(json.dumps([{"pattern": "x"}]), encoding="utf-8")
    with pytest.raises(ValueError):
        load_notation_file(str(p))


def test_scalar_document_is_rejected(tmp_path):
    p = tmp_path / "rules.yaml"
    p.write_text("just a string\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_notation_file(str(p))


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_notation_file(str(tmp_path / "none.yaml"))
