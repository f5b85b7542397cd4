"""YAML / JSON から独自の表記ルール(表記 → 推奨表記)をロードするユーティリティ。

フォーマット例:

YAML (配列):
---
- pattern: "ウェブサイト"
  suggestion: "Webサイト"
- pattern: "E-mail"
  suggestion: "メール"

YAML (辞書):
---
ウェブサイト: Webサイト

JSON: 上記と同じ構造。
"""
from __future__ import annotations
import json
from pathlib import Path
from typing import Dict

import yaml

from .errors import AppError, ErrorCode

ENCODING_CANDIDATES = ("utf-8", "utf-8-sig", "utf-16", "utf-16-le", "utf-16-be", "cp932")


def _decode(raw: bytes, path: str) -> str:
    # PowerShell Set-Content 既定の UTF-16 も考慮
    for enc in ENCODING_CANDIDATES:
        try:
            return raw.decode(enc)
        except UnicodeDecodeError:
            continue
    raise AppError(ErrorCode.ENCODING_ERROR, f"ルールファイルを復号できません: {path}")


def load_notation_file(path: str) -> Dict[str, str]:
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(path)
    text = _decode(p.read_bytes(), path).lstrip("\ufeff")
    if p.suffix.lower() in {".yaml", ".yml"}:
        data = yaml.safe_load(text)
    else:
        data = json.loads(text)
    rules: Dict[str, str] = {}
    if isinstance(data, dict):
        for k, v in data.items():
            rules[str(k)] = str(v)
        return rules
    if not isinstance(data, list):
        raise ValueError("ルールファイルは配列または辞書である必要があります")
    for item in data:
        if not isinstance(item, dict):
            continue
        pat = item.get("pattern")
        sug = item.get("suggestion")
        if not pat or sug is None:
            raise ValueError(f"pattern と suggestion が必要です: {item!r}")
        rules[str(pat)] = str(sug)
    return rules


__all__ = ["load_notation_file"]
