"""japroof
日本語文章の文法・文体・表記の校閲エンジン。

主な提供機能:
- 形態素列の文分割と、登録順に実行される高度ルール群(39種)
- ルール単位の失敗の切り離しと、バージョン付きの解析結果
- ソースコード中のコメント/文字列リテラルからの日本語抽出
- CLI インターフェース
"""
from __future__ import annotations
from typing import Optional, Sequence

from .config import DEFAULT_CONFIG, AdvancedRulesConfig, config_from_mapping, load_config
from .errors import AppError, ErrorCode, ErrorHandler
from .models import AdvancedDiagnostic, Diagnostic, DocumentAnalysis, Severity, Token
from .session import AnalysisSession, DocumentVersions


def analyze_text(
    text: str,
    config: AdvancedRulesConfig = DEFAULT_CONFIG,
    tokens: Optional[Sequence[Token]] = None,
    language_id: str = "plaintext",
    uri: str = "untitled:memory",
) -> DocumentAnalysis:
    """テキスト1件を解析する。tokens を省略すると形態素解析器で分割する。"""
    session = AnalysisSession(config=config)
    return session.analyze(uri, 1, text, language_id=language_id, tokens=tokens)


__all__ = [
    "analyze_text",
    "AnalysisSession",
    "DocumentVersions",
    "AdvancedRulesConfig",
    "DEFAULT_CONFIG",
    "config_from_mapping",
    "load_config",
    "AppError",
    "ErrorCode",
    "ErrorHandler",
    "AdvancedDiagnostic",
    "Diagnostic",
    "DocumentAnalysis",
    "Severity",
    "Token",
]

__version__ = "0.1.0"
