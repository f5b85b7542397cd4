import dataclasses
import re

import pytest

from japroof.config import DEFAULT_CONFIG
from japroof.models import Token
from japroof.rules.base import RuleContext
from japroof.segmenter import segment_sentences

_ROUGH = re.compile(r"[。！？!?]|[^\s。！？!?]+")


def rough_tokens(text):
    # 空白区切りの塊を名詞、文末記号を記号として扱う簡易トークナイザ
    out = []
    for m in _ROUGH.finditer(text):
        pos = "記号" if m.group(0) in "。！？!?" else "名詞"
        out.append(Token(surface=m.group(0), pos=pos, start=m.start(), end=m.end()))
    return out


def build_tokens(text, parts):
    """(表層形, 品詞, 追加属性) を text 上に左から順に配置する。"""
    out = []
    idx = 0
    for part in parts:
        if isinstance(part, str):
            surface, pos, extra = part, "名詞", {}
        else:
            surface, pos = part[0], part[1]
            extra = part[2] if len(part) > 2 else {}
        start = text.index(surface, idx)
        end = start + len(surface)
        out.append(Token(surface=surface, pos=pos, start=start, end=end, **extra))
        idx = end
    return out


def make_context(text, tokens, **overrides):
    config = dataclasses.replace(DEFAULT_CONFIG, **overrides) if overrides else DEFAULT_CONFIG
    return RuleContext(document_text=text, sentences=tuple(segment_sentences(tokens, text)), config=config)


@pytest.fixture
def rough():
    return rough_tokens


@pytest.fixture
def build():
    return build_tokens


@pytest.fixture
def run_rule():
    """rule.check を実行する。tokens を省略すると簡易トークナイザを使う。"""
    def _run(rule, text, tokens=None, **overrides):
        if tokens is None:
            tokens = rough_tokens(text)
        return rule.check(tokens, make_context(text, tokens, **overrides))
    return _run


@pytest.fixture
def context():
    return make_context
