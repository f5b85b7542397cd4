"""トークン列を文に分割する。

句点・感嘆符・疑問符のトークンで文を閉じ、その記号は閉じた文に含める。
連続する終端記号と、終端記号の直後の閉じ括弧は直前の文に吸収するため、
空の文は生じない。
"""
from __future__ import annotations
from typing import List, Sequence

from .models import Sentence, Token, is_terminal, make_sentence

CLOSING_BRACKETS = "」』）)】〕］]｝}》〉"


def _is_closing(tok: Token) -> bool:
    return bool(tok.surface) and all(ch in CLOSING_BRACKETS for ch in tok.surface)


def segment_sentences(tokens: Sequence[Token], text: str) -> List[Sentence]:
    groups: List[List[Token]] = []
    current: List[Token] = []
    for tok in tokens:
        if not current and groups:
            last = groups[-1][-1]
            # 「。。」「！？」や「はい。」の閉じ括弧は直前の文へ
            if is_terminal(tok) or (_is_closing(tok) and tok.start == last.end):
                groups[-1].append(tok)
                continue
        current.append(tok)
        if is_terminal(tok):
            groups.append(current)
            current = []
    if current:
        groups.append(current)
    return [make_sentence(g, text) for g in groups]


__all__ = ["CLOSING_BRACKETS", "segment_sentences"]
