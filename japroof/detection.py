"""ルール間で共有する検出アルゴリズム。

- トークン窓の走査 (n-gram)
- 優勢表記の多数決
- 連続区間の抽出
- 辞書引き(リテラル検索)と重複の解消
"""
from __future__ import annotations
import re
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Dict, Hashable, Iterable, List, Mapping, Optional, Sequence, Tuple

from .models import Token


@dataclass(frozen=True)
class Hit:
    """テキスト上の一致。key は辞書の見出し語や表記種別。"""
    start: int
    end: int
    key: str
    text: str = ""


# ---------------------------------------------------------------------------
# トークン窓

def scan_token_windows(
    tokens: Sequence[Token],
    width: int,
    predicate: Callable[[Sequence[Token]], bool],
) -> List[Tuple[int, int]]:
    """幅 width の窓を左から走査し、述語が真の窓を (先頭, 末尾) の添字で返す。

    一致した窓の次から走査を再開するため、結果は重ならない。
    """
    out: List[Tuple[int, int]] = []
    i = 0
    n = len(tokens)
    while i + width <= n:
        if predicate(tokens[i:i + width]):
            out.append((i, i + width - 1))
            i += width
        else:
            i += 1
    return out


def find_token_phrases(tokens: Sequence[Token], phrases: Iterable[str]) -> List[Tuple[int, int, str]]:
    """表層形の連結がフレーズと一致するトークン列を探す(両端はトークン境界)。"""
    ordered = sorted(set(phrases), key=lambda p: (-len(p), p))
    out: List[Tuple[int, int, str]] = []
    i = 0
    n = len(tokens)
    while i < n:
        matched = None
        for phrase in ordered:
            buf = ""
            j = i
            while j < n and len(buf) < len(phrase):
                buf += tokens[j].surface
                j += 1
            if buf == phrase:
                matched = (i, j - 1, phrase)
                break
        if matched:
            out.append(matched)
            i = matched[1] + 1
        else:
            i += 1
    return out


# ---------------------------------------------------------------------------
# 優勢表記

def dominant_rendering(hits: Sequence[Hit]) -> Optional[str]:
    """出現数が最多の表記。同数なら先に現れた方。"""
    if not hits:
        return None
    ordered = sorted(hits, key=lambda h: (h.start, h.end))
    counts = Counter(h.key for h in ordered)
    first_seen: Dict[str, int] = {}
    for idx, h in enumerate(ordered):
        first_seen.setdefault(h.key, idx)
    return min(counts, key=lambda k: (-counts[k], first_seen[k]))


def flag_minority(hits: Sequence[Hit]) -> Tuple[Optional[str], List[Hit]]:
    """(優勢表記, 少数派の一致) を返す。表記が1種類だけなら何も返さない。"""
    if len({h.key for h in hits}) < 2:
        return None, []
    dominant = dominant_rendering(hits)
    minority = [h for h in sorted(hits, key=lambda h: (h.start, h.end)) if h.key != dominant]
    return dominant, minority


def classify_matches(text: str, patterns: Mapping[str, "re.Pattern[str]"], offset: int = 0) -> List[Hit]:
    """表記種別ごとの正規表現で一致を集める。"""
    hits: List[Hit] = []
    for key, rx in patterns.items():
        for m in rx.finditer(text):
            hits.append(Hit(offset + m.start(), offset + m.end(), key, m.group(0)))
    hits.sort(key=lambda h: (h.start, h.end))
    return hits


# ---------------------------------------------------------------------------
# 連続区間

def consecutive_runs(keys: Sequence[Optional[Hashable]], min_length: int) -> List[Tuple[int, int]]:
    """同じキーが min_length 回以上連続する区間を (先頭, 末尾) で返す。None は区切り。"""
    out: List[Tuple[int, int]] = []
    i = 0
    n = len(keys)
    while i < n:
        if keys[i] is None:
            i += 1
            continue
        j = i
        while j + 1 < n and keys[j + 1] == keys[i]:
            j += 1
        if j - i + 1 >= min_length:
            out.append((i, j))
        i = j + 1
    return out


# ---------------------------------------------------------------------------
# 辞書引き

def find_literals(
    text: str,
    phrases: Iterable[str],
    accept: Optional[Callable[[str, int, int], bool]] = None,
) -> List[Hit]:
    """テキスト中の見出し語の出現をすべて返す。accept で個別に除外できる。"""
    hits: List[Hit] = []
    for phrase in phrases:
        if not phrase:
            continue
        idx = text.find(phrase)
        while idx >= 0:
            end = idx + len(phrase)
            if accept is None or accept(text, idx, end):
                hits.append(Hit(idx, end, phrase, phrase))
            idx = text.find(phrase, idx + 1)
    return longest_non_overlapping(hits)


def longest_non_overlapping(hits: Iterable[Hit]) -> List[Hit]:
    """重なる一致は長い方を残す。結果は出現順。"""
    kept: List[Hit] = []
    for h in sorted(hits, key=lambda h: (-(h.end - h.start), h.start, h.key)):
        if all(h.end <= k.start or h.start >= k.end for k in kept):
            kept.append(h)
    kept.sort(key=lambda h: (h.start, h.end))
    return kept


def word_boundary(text: str, start: int, end: int) -> bool:
    """英数字の語の途中でないこと。"""
    before = text[start - 1] if start > 0 else ""
    after = text[end] if end < len(text) else ""
    return not _is_word_char(before) and not _is_word_char(after)


def _is_word_char(ch: str) -> bool:
    return bool(ch) and (ch.isascii() and (ch.isalnum() or ch == "_"))


__all__ = [
    "Hit",
    "scan_token_windows",
    "find_token_phrases",
    "dominant_rendering",
    "flag_minority",
    "classify_matches",
    "consecutive_runs",
    "find_literals",
    "longest_non_overlapping",
    "word_boundary",
]
