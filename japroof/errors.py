"""エラー種別とエラーハンドラ。

AppError はコード付きの例外で、入力エラー・形態素解析器エラー・外部参照エラーを表す。
ErrorHandler はログ記録、リトライ回数の管理、通知判定、バックオフ計算をまとめて担う。
"""
from __future__ import annotations
import logging
from enum import Enum
from typing import Callable, Dict, Optional

LOGGER = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    ANALYZER_INIT_ERROR = "ANALYZER_INIT_ERROR"
    ANALYZER_DICT_ERROR = "ANALYZER_DICT_ERROR"
    ANALYZER_PARSE_ERROR = "ANALYZER_PARSE_ERROR"
    WIKIPEDIA_REQUEST_FAILED = "WIKIPEDIA_REQUEST_FAILED"
    WIKIPEDIA_TIMEOUT = "WIKIPEDIA_TIMEOUT"
    WIKIPEDIA_RATE_LIMIT = "WIKIPEDIA_RATE_LIMIT"
    ENCODING_ERROR = "ENCODING_ERROR"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    COMMENT_EXTRACTION_ERROR = "COMMENT_EXTRACTION_ERROR"


class AppError(Exception):
    def __init__(self, code: ErrorCode, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


RETRYABLE_CODES = frozenset({
    ErrorCode.ANALYZER_PARSE_ERROR,
    ErrorCode.WIKIPEDIA_REQUEST_FAILED,
    ErrorCode.WIKIPEDIA_TIMEOUT,
})

RECOVERY_SUGGESTIONS: Dict[ErrorCode, str] = {
    ErrorCode.ANALYZER_INIT_ERROR: "形態素解析器の初期化に失敗しました。fugashi または janome をインストールしてください。",
    ErrorCode.ANALYZER_DICT_ERROR: "辞書の読み込みに失敗しました。unidic-lite などの辞書パッケージを確認してください。",
    ErrorCode.ANALYZER_PARSE_ERROR: "解析中にエラーが発生しました。しばらく待ってから再試行してください。",
    ErrorCode.WIKIPEDIA_REQUEST_FAILED: "Wikipedia APIへのリクエストに失敗しました。ネットワーク接続を確認してください。",
    ErrorCode.WIKIPEDIA_TIMEOUT: "Wikipedia APIがタイムアウトしました。ネットワーク状況を確認するか、後で再試行してください。",
    ErrorCode.WIKIPEDIA_RATE_LIMIT: "Wikipedia APIのレート制限に達しました。しばらく待ってから再試行してください。",
    ErrorCode.ENCODING_ERROR: "ファイルのエンコーディングエラーです。UTF-8でファイルを保存してください。",
    ErrorCode.FILE_TOO_LARGE: "ファイルが大きすぎます。解析対象のファイルサイズを小さくしてください。",
    ErrorCode.COMMENT_EXTRACTION_ERROR: "コメント抽出でエラーが発生しました。ファイルの構文を確認してください。",
}

DEFAULT_SUGGESTION = "予期しないエラーが発生しました。問題が続く場合は再起動してください。"

Notifier = Callable[[AppError, str], None]


class ErrorHandler:
    def __init__(
        self,
        max_retries: int = 3,
        base_backoff_ms: int = 1000,
        max_backoff_ms: int = 30000,
        notifier: Optional[Notifier] = None,
    ):
        self.max_retries = max_retries
        self.base_backoff_ms = base_backoff_ms
        self.max_backoff_ms = max_backoff_ms
        self.notifier = notifier
        self._retry_count: Dict[str, int] = {}

    def handle(self, error: AppError, context: str) -> bool:
        """エラーを記録し、通知した場合は True を返す。

        リトライ可能なエラーは最大リトライ回数を超えた時だけ通知する。
        """
        if self.is_retryable(error.code):
            count = self._retry_count.get(context, 0) + 1
            self._retry_count[context] = count
            LOGGER.warning("%s (context=%s, retry=%d)", error, context, count)
            notify = count > self.max_retries
        else:
            LOGGER.error("%s (context=%s)", error, context)
            notify = True
        if notify and self.notifier is not None:
            self.notifier(error, self.recovery_suggestion(error.code))
        return notify

    @staticmethod
    def is_retryable(code: ErrorCode) -> bool:
        return code in RETRYABLE_CODES

    def backoff_delay(self, retry_count: int) -> int:
        return min(self.base_backoff_ms * (2 ** retry_count), self.max_backoff_ms)

    @staticmethod
    def recovery_suggestion(code: ErrorCode) -> str:
        return RECOVERY_SUGGESTIONS.get(code, DEFAULT_SUGGESTION)

    def retry_count(self, context: str) -> int:
        return self._retry_count.get(context, 0)

    def reset_retry_count(self, context: str) -> None:
        self._retry_count.pop(context, None)


__all__ = [
    "ErrorCode",
    "AppError",
    "ErrorHandler",
    "RETRYABLE_CODES",
    "RECOVERY_SUGGESTIONS",
]
