"""解析セッション。

1回の解析は (uri, version, 設定スナップショット) に対して実行され、結果には
開始時のバージョンが付く。最新バージョンとの比較は結果を受け取る側
(DocumentVersions.is_current / DocumentAnalysis.is_stale) で行い、実行中の解析は取り消さない。
"""
from __future__ import annotations
import logging
import re
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Sequence, Union

from .aggregator import aggregate
from .config import DEFAULT_CONFIG, AdvancedRulesConfig
from .errors import AppError, ErrorCode, ErrorHandler
from .extractor import DOCUMENT_LANGUAGES, mask_non_japanese
from .file_scanner import decode_bytes
from .models import DocumentAnalysis, Token, validate_tokens
from .pipeline import RuleExecutor
from .rules import default_rules
from .rules.base import Rule, RuleContext
from .rules.terms import TermLookup
from .segmenter import segment_sentences

LOGGER = logging.getLogger(__name__)

TokenizerFn = Callable[[str], List[Token]]

_JAPANESE = re.compile(r"[\u3040-\u30FF\u3400-\u9FFF\uF900-\uFAFF]")
CONTENT_PROBE_LENGTH = 1000


class DocumentVersions:
    """uri ごとの最新バージョンを保持する。"""

    def __init__(self):
        self._versions: Dict[str, int] = {}
        self._lock = threading.Lock()

    def bump(self, uri: str) -> int:
        with self._lock:
            v = self._versions.get(uri, 0) + 1
            self._versions[uri] = v
            return v

    def set(self, uri: str, version: int) -> None:
        with self._lock:
            self._versions[uri] = version

    def latest(self, uri: str) -> int:
        with self._lock:
            return self._versions.get(uri, 0)

    def is_current(self, analysis: DocumentAnalysis) -> bool:
        return not analysis.is_stale(self.latest(analysis.uri))

    def forget(self, uri: str) -> None:
        with self._lock:
            self._versions.pop(uri, None)


def is_untitled(uri: str) -> bool:
    return uri.startswith("untitled:")


def should_analyze(uri: str, language_id: str, text: str, config: AdvancedRulesConfig) -> bool:
    if language_id in config.excluded_language_ids:
        return False
    if is_untitled(uri):
        return config.enable_untitled_files
    if language_id in DOCUMENT_LANGUAGES:
        return True
    if not config.enable_content_based_detection:
        return False
    return bool(_JAPANESE.search(text[:CONTENT_PROBE_LENGTH]))


class AnalysisSession:
    def __init__(
        self,
        tokenizer: Optional[TokenizerFn] = None,
        config: AdvancedRulesConfig = DEFAULT_CONFIG,
        rules: Optional[Sequence[Rule]] = None,
        lookup: Optional[TermLookup] = None,
        jobs: int = 1,
        workers: Optional[int] = None,
        error_handler: Optional[ErrorHandler] = None,
    ):
        self._tokenizer = tokenizer
        self.config = config
        self.executor = RuleExecutor(rules if rules is not None else default_rules(lookup), jobs=jobs)
        self.error_handler = error_handler or ErrorHandler()
        self._workers = workers
        self._pool: Optional[ThreadPoolExecutor] = None
        self._pool_lock = threading.Lock()

    @property
    def tokenizer(self) -> TokenizerFn:
        if self._tokenizer is None:
            from .morph import Tokenizer
            self._tokenizer = Tokenizer()
        return self._tokenizer

    def update_config(self, config: AdvancedRulesConfig) -> None:
        # 参照の差し替えのみ。実行中の解析は開始時のスナップショットを使い続ける
        self.config = config

    def analyze(
        self,
        uri: str,
        version: int,
        text: Union[str, bytes],
        language_id: str = "plaintext",
        tokens: Optional[Sequence[Token]] = None,
    ) -> DocumentAnalysis:
        config = self.config
        try:
            if isinstance(text, bytes):
                text = decode_bytes(text)
            if len(text) > config.max_document_length:
                raise AppError(
                    ErrorCode.FILE_TOO_LARGE,
                    f"{uri}: {len(text)} characters exceeds limit {config.max_document_length}",
                )
            if not should_analyze(uri, language_id, text, config):
                LOGGER.debug("skip %s (%s)", uri, language_id)
                return DocumentAnalysis(uri=uri, version=version)
            document = mask_non_japanese(text, language_id)
            if not document.strip():
                return DocumentAnalysis(uri=uri, version=version)
            if tokens is None:
                tokens = self._tokenize(document)
            tokens = list(tokens)
            self._check_tokens(tokens, document)
        except AppError as e:
            return self._fail(uri, version, e)

        sentences = segment_sentences(tokens, document)
        context = RuleContext(document_text=document, sentences=tuple(sentences), config=config)
        results = self.executor.run(tokens, context)
        for res in results:
            if not res.success and isinstance(res.error, AppError):
                self.error_handler.handle(res.error, f"{uri}#{res.rule_name}")
        return DocumentAnalysis(
            uri=uri,
            version=version,
            diagnostics=tuple(aggregate(results)),
            rule_results=tuple(results),
        )

    def _tokenize(self, document: str) -> List[Token]:
        try:
            return list(self.tokenizer(document))
        except AppError:
            raise
        except Exception as e:
            raise AppError(ErrorCode.ANALYZER_PARSE_ERROR, f"tokenizer failed: {e}", e) from e

    @staticmethod
    def _check_tokens(tokens: Sequence[Token], document: str) -> None:
        if not tokens:
            raise AppError(ErrorCode.ANALYZER_PARSE_ERROR, "tokenizer returned no tokens for non-blank text")
        problem = validate_tokens(tokens)
        if problem is None and tokens[-1].end > len(document):
            problem = f"token end {tokens[-1].end} is beyond the document length {len(document)}"
        if problem is not None:
            raise AppError(ErrorCode.ANALYZER_PARSE_ERROR, problem)

    def _fail(self, uri: str, version: int, error: AppError) -> DocumentAnalysis:
        self.error_handler.handle(error, uri)
        return DocumentAnalysis(uri=uri, version=version, error=error)

    def submit(
        self,
        uri: str,
        version: int,
        text: Union[str, bytes],
        language_id: str = "plaintext",
        tokens: Optional[Sequence[Token]] = None,
    ) -> "Future[DocumentAnalysis]":
        with self._pool_lock:
            if self._pool is None:
                self._pool = ThreadPoolExecutor(max_workers=self._workers, thread_name_prefix="japroof")
            pool = self._pool
        return pool.submit(self.analyze, uri, version, text, language_id, tokens)

    def close(self) -> None:
        with self._pool_lock:
            if self._pool is not None:
                self._pool.shutdown(wait=True)
                self._pool = None

    def __enter__(self) -> "AnalysisSession":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


__all__ = ["AnalysisSession", "DocumentVersions", "should_analyze"]
