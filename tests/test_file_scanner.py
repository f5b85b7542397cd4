import pytest

from japroof.errors import AppError, ErrorCode
from japroof.file_scanner import decode_bytes, is_probably_text, iter_files, language_id_for, read_text


def test_decode_candidates():
    assert decode_bytes("日本語".encode("utf-8")) == "日本語"
    assert decode_bytes("日本語".encode("cp932")) == "日本語"
    assert decode_bytes("日本語".encode("utf-16")) == "日本語"
    assert decode_bytes("\ufeff日本語".encode("utf-8")) == "日本語"


def test_decode_failure():
    with pytest.raises(AppError) as exc:
        decode_bytes(b"\xe3\x81", ("utf-8",))
    assert exc.value.code is ErrorCode.ENCODING_ERROR


def test_is_probably_text():
    assert is_probably_text(b"")
    assert is_probably_text("テキスト".encode("utf-8"))
    assert not is_probably_text(bytes(range(0, 8)) * 10)


def test_read_text_limits(tmp_path):
    p = tmp_path / "big.txt"
    p.write_text("あ" * 100, encoding="utf-8")
    with pytest.raises(AppError) as exc:
        read_text(p, max_bytes=10)
    assert exc.value.code is ErrorCode.FILE_TOO_LARGE
    assert read_text(p) == "あ" * 100


def test_read_text_binary(tmp_path):
    p = tmp_path / "blob.bin"
    p.write_bytes(bytes(range(0, 8)) * 10)
    with pytest.raises(AppError) as exc:
        read_text(p)
    assert exc.value.code is ErrorCode.ENCODING_ERROR


def test_iter_files(tmp_path):
    (tmp_path / "b.md").write_text("本文", encoding="utf-8")
    (tmp_path / "a.py").write_text("# コメント", encoding="utf-8")
    (tmp_path / "blob.bin").write_bytes(bytes(range(0, 8)) * 10)
    git = tmp_path / ".git"
    git.mkdir()
    (git / "config").write_text("x", encoding="utf-8")
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / "c.txt").write_text("テキスト", encoding="utf-8")
    found = [p.relative_to(tmp_path).as_posix() for p in iter_files([tmp_path])]
    assert found == ["a.py", "b.md", "sub/c.txt"]


def test_language_id_for():
    assert language_id_for("README.md") == "markdown"
    assert language_id_for("src/app.TS") == "typescript"
    assert language_id_for("Dockerfile") == "dockerfile"
    assert language_id_for("notes") == "plaintext"
