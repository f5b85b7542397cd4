"""ソースコードから検査対象の日本語領域だけを残す。

コードファイルではコメント(#, //, /* */)と文字列リテラルの中身だけを残し、
それ以外は空白に置き換える。改行は残すので、オフセットと行番号は元のファイルと一致する。
markdown / plaintext はそのまま返す。

注意: 字句解析ではなく正規表現によるヒューリスティックです。
"""
from __future__ import annotations
import re
from typing import Dict, Iterator, List, Tuple

from .errors import AppError, ErrorCode

DOCUMENT_LANGUAGES = frozenset({"markdown", "plaintext"})

HASH_LANGUAGES = frozenset({
    "python", "shellscript", "ruby", "perl", "r", "yaml", "toml", "dockerfile", "makefile", "powershell",
})
SLASH_LANGUAGES = frozenset({
    "javascript", "typescript", "javascriptreact", "typescriptreact", "java", "c", "cpp", "csharp",
    "go", "rust", "kotlin", "swift", "scala", "dart", "scss", "less", "css",
})
BOTH_LANGUAGES = frozenset({"php"})

_BLOCK = r"(?P<block>/\*.*?\*/)"
_LINE_SLASH = r"(?P<slash>//[^\n]*)"
_LINE_HASH = r"(?P<hash>#[^\n]*)"
_TRIPLE = r"(?P<triple>\"\"\".*?\"\"\"|'''.*?''')"
_BACKTICK = r"(?P<backtick>`(?:\\.|[^`\\])*`)"
_STRING = r"(?P<string>(?P<quote>[\"'])(?:(?=\\)\\.|(?!(?P=quote))[^\n])*?(?P=quote))"

_PATTERN_CACHE: Dict[Tuple[bool, bool, bool, bool], "re.Pattern[str]"] = {}

# 区切り記号の長さ (先頭, 末尾)
_DELIMITERS = {
    "block": (2, 2),
    "slash": (2, 0),
    "hash": (1, 0),
    "triple": (3, 3),
    "backtick": (1, 1),
    "string": (1, 1),
}
_BLOCK_STAR = re.compile(r"(?m)^([ \t]*)\*")


def _pattern(language_id: str) -> "re.Pattern[str]":
    slash = language_id in SLASH_LANGUAGES or language_id in BOTH_LANGUAGES
    hash_ = language_id in HASH_LANGUAGES or language_id in BOTH_LANGUAGES
    if not slash and not hash_:
        # 不明な言語はどちらの記法も受け付ける
        slash = hash_ = True
    triple = language_id == "python" or not (language_id in SLASH_LANGUAGES or language_id in HASH_LANGUAGES)
    backtick = language_id.startswith(("javascript", "typescript")) or language_id == "go"
    key = (slash, hash_, triple, backtick)
    pat = _PATTERN_CACHE.get(key)
    if pat is None:
        parts: List[str] = []
        if slash:
            parts += [_BLOCK, _LINE_SLASH]
        if triple:
            parts.append(_TRIPLE)
        if hash_:
            parts.append(_LINE_HASH)
        if backtick:
            parts.append(_BACKTICK)
        parts.append(_STRING)
        pat = re.compile("|".join(parts), re.DOTALL)
        _PATTERN_CACHE[key] = pat
    return pat


def iter_regions(text: str, language_id: str) -> Iterator[Tuple[int, int, str]]:
    """コメント・文字列リテラルの中身を (start, end, 種別) で返す。区切り記号は含めない。"""
    for m in _pattern(language_id).finditer(text):
        kind = m.lastgroup
        if kind is None:
            continue
        head, tail = _DELIMITERS[kind]
        start, end = m.start() + head, m.end() - tail
        if start < end:
            yield start, end, kind


def _blank(text: str) -> str:
    return "".join(ch if ch == "\n" else " " for ch in text)


def mask_non_japanese(text: str, language_id: str = "plaintext") -> str:
    if language_id in DOCUMENT_LANGUAGES:
        return text
    try:
        out: List[str] = []
        pos = 0
        for start, end, kind in iter_regions(text, language_id):
            out.append(_blank(text[pos:start]))
            region = text[start:end]
            if kind == "block":
                # 行頭の装飾用 * は外す
                region = _BLOCK_STAR.sub(lambda m: m.group(1) + " ", region)
            out.append(region)
            pos = end
        out.append(_blank(text[pos:]))
        masked = "".join(out)
    except Exception as e:
        raise AppError(ErrorCode.COMMENT_EXTRACTION_ERROR, f"failed to extract comments ({language_id}): {e}", e) from e
    if len(masked) != len(text):
        raise AppError(ErrorCode.COMMENT_EXTRACTION_ERROR, f"masked text length mismatch ({language_id})")
    return masked


__all__ = ["mask_non_japanese", "iter_regions", "DOCUMENT_LANGUAGES"]
