"""形態素解析器のラッパ。

優先度:
- fugashi(MeCab) + unidic系 があればそれを利用
- なければ Janome にフォールバック

どちらの結果も Token (表層形・品詞・活用・原形・読み・文字オフセット) に揃える。
"""
from __future__ import annotations
import logging
import threading
from typing import Any, List, Optional

from .errors import AppError, ErrorCode
from .models import Token

LOGGER = logging.getLogger(__name__)

BACKENDS = ("fugashi", "janome")


def _field(value: Any) -> str:
    if value is None or value == "":
        return "*"
    return str(value)


class Tokenizer:
    """backend を省略すると fugashi → janome の順に読み込みを試す。"""

    def __init__(self, backend: Optional[str] = None):
        if backend is not None and backend not in BACKENDS:
            raise ValueError(f"unknown backend: {backend!r}")
        self.requested = backend
        self.backend: Optional[str] = None
        self._impl = None
        self._lock = threading.Lock()

    def _load(self) -> None:
        if self._impl is not None:
            return
        candidates = [self.requested] if self.requested else list(BACKENDS)
        dict_error: Optional[BaseException] = None
        for name in candidates:
            try:
                if name == "fugashi":
                    from fugashi import Tagger
                    impl = Tagger
                else:
                    from janome.tokenizer import Tokenizer as JanomeTokenizer
                    impl = JanomeTokenizer
            except ImportError:
                LOGGER.debug("%s is not installed", name)
                continue
            try:
                self._impl = impl()
            except Exception as e:
                # 本体はあるが辞書が読めない
                LOGGER.debug("%s dictionary load failed: %s", name, e)
                dict_error = e
                continue
            self.backend = name
            LOGGER.debug("tokenizer backend: %s", name)
            return
        if dict_error is not None:
            raise AppError(ErrorCode.ANALYZER_DICT_ERROR, f"failed to load dictionary: {dict_error}", dict_error) from dict_error
        raise AppError(ErrorCode.ANALYZER_INIT_ERROR, "no morphological analyzer available (install fugashi[unidic-lite] or janome)")

    def tokenize(self, text: str) -> List[Token]:
        with self._lock:
            self._load()
            try:
                if self.backend == "fugashi":
                    return self._tokenize_fugashi(text)
                return self._tokenize_janome(text)
            except AppError:
                raise
            except Exception as e:
                raise AppError(ErrorCode.ANALYZER_PARSE_ERROR, f"tokenize failed: {e}", e) from e

    __call__ = tokenize

    def _locate(self, text: str, surface: str, idx: int) -> int:
        pos = text.find(surface, idx)
        if pos < 0:
            raise AppError(ErrorCode.ANALYZER_PARSE_ERROR, f"token {surface!r} not found after offset {idx}")
        return pos

    def _tokenize_fugashi(self, text: str) -> List[Token]:
        out: List[Token] = []
        idx = 0
        for w in self._impl(text):
            surf = w.surface
            if not surf.strip():
                continue
            pos = self._locate(text, surf, idx)
            end = pos + len(surf)
            f = w.feature
            out.append(Token(
                surface=surf,
                pos=_field(getattr(f, "pos1", None)),
                pos_detail1=_field(getattr(f, "pos2", None)),
                pos_detail2=_field(getattr(f, "pos3", None)),
                pos_detail3=_field(getattr(f, "pos4", None)),
                conjugation=_field(getattr(f, "cType", None)),
                conjugation_form=_field(getattr(f, "cForm", None)),
                base_form=getattr(f, "lemma", None) or surf,
                reading=getattr(f, "kana", None) or "",
                pronunciation=getattr(f, "pron", None) or "",
                start=pos,
                end=end,
            ))
            idx = end
        return out

    def _tokenize_janome(self, text: str) -> List[Token]:
        out: List[Token] = []
        idx = 0
        for tok in self._impl.tokenize(text):
            surf = tok.surface
            if not surf.strip():
                continue
            pos = self._locate(text, surf, idx)
            end = pos + len(surf)
            parts = (tok.part_of_speech.split(",") + ["*"] * 4)[:4]
            out.append(Token(
                surface=surf,
                pos=parts[0],
                pos_detail1=parts[1],
                pos_detail2=parts[2],
                pos_detail3=parts[3],
                conjugation=_field(tok.infl_type),
                conjugation_form=_field(tok.infl_form),
                base_form=tok.base_form if tok.base_form not in ("", "*") else surf,
                reading=tok.reading if tok.reading != "*" else "",
                pronunciation=tok.phonetic if tok.phonetic != "*" else "",
                start=pos,
                end=end,
            ))
            idx = end
        return out


def is_available(backend: Optional[str] = None) -> bool:
    try:
        Tokenizer(backend)._load()
        return True
    except AppError:
        return False


__all__ = ["Tokenizer", "is_available", "BACKENDS"]
