"""ファイルの読み込みと走査。

- 拡張子フィルタは行わず、バイナリらしいものは除外(ヒューリスティック)。
- 文字コードは候補を順に試し、どれでも読めなければ ENCODING_ERROR。
- 拡張子から言語IDを推定する。
"""
from __future__ import annotations
import os
from pathlib import Path
from typing import Iterable, Iterator, Optional, Sequence

from .errors import AppError, ErrorCode

BINARY_BYTES = set(range(0, 9)) | {11, 12} | set(range(14, 32))
ENCODING_CANDIDATES = ("utf-8", "cp932", "shift_jis", "euc_jp")
SKIP_DIRS = frozenset({".git", ".hg", ".svn", "node_modules", "__pycache__", ".venv", "venv", ".tox"})

LANGUAGE_IDS = {
    ".md": "markdown", ".markdown": "markdown",
    ".txt": "plaintext", ".text": "plaintext", ".rst": "plaintext",
    ".py": "python", ".sh": "shellscript", ".bash": "shellscript", ".rb": "ruby", ".pl": "perl",
    ".r": "r", ".yaml": "yaml", ".yml": "yaml", ".toml": "toml", ".ps1": "powershell",
    ".js": "javascript", ".mjs": "javascript", ".cjs": "javascript", ".jsx": "javascriptreact",
    ".ts": "typescript", ".tsx": "typescriptreact", ".java": "java",
    ".c": "c", ".h": "c", ".cpp": "cpp", ".cc": "cpp", ".hpp": "cpp", ".cs": "csharp",
    ".go": "go", ".rs": "rust", ".kt": "kotlin", ".swift": "swift", ".scala": "scala", ".dart": "dart",
    ".css": "css", ".scss": "scss", ".less": "less", ".php": "php",
}
SPECIAL_NAMES = {"dockerfile": "dockerfile", "makefile": "makefile"}


def is_probably_text(data: bytes, threshold: float = 0.30) -> bool:
    if not data:
        return True
    # UTF-16 は NUL を多く含むので BOM で判定
    if data[:2] in (b"\xff\xfe", b"\xfe\xff"):
        return True
    non_text = sum(b in BINARY_BYTES for b in data)
    return non_text / len(data) < threshold


def decode_bytes(raw: bytes, encoding_candidates: Sequence[str] = ENCODING_CANDIDATES) -> str:
    if raw[:2] in (b"\xff\xfe", b"\xfe\xff"):
        encoding_candidates = ("utf-16",) + tuple(encoding_candidates)
    for enc in encoding_candidates:
        try:
            text = raw.decode(enc)
        except UnicodeDecodeError:
            continue
        return text.lstrip("\ufeff")
    raise AppError(ErrorCode.ENCODING_ERROR, f"could not decode with any of {', '.join(encoding_candidates)}")


def read_text(
    path: Path,
    max_bytes: Optional[int] = None,
    encoding_candidates: Sequence[str] = ENCODING_CANDIDATES,
) -> str:
    path = Path(path)
    if max_bytes is not None:
        size = path.stat().st_size
        if size > max_bytes:
            raise AppError(ErrorCode.FILE_TOO_LARGE, f"{path}: {size} bytes exceeds limit {max_bytes}")
    raw = path.read_bytes()
    if not is_probably_text(raw):
        raise AppError(ErrorCode.ENCODING_ERROR, f"{path}: looks like a binary file")
    try:
        return decode_bytes(raw, encoding_candidates)
    except AppError as e:
        raise AppError(ErrorCode.ENCODING_ERROR, f"{path}: {e.message}") from e


def _looks_binary(path: Path, probe: int = 8192) -> bool:
    try:
        with path.open("rb") as f:
            return not is_probably_text(f.read(probe))
    except OSError:
        return True


def iter_files(paths: Iterable[str | os.PathLike[str]]) -> Iterator[Path]:
    for p in paths:
        path = Path(p)
        if path.is_file():
            yield path
        elif path.is_dir():
            for root, dirs, files in os.walk(path):
                dirs[:] = sorted(d for d in dirs if d not in SKIP_DIRS)
                for f in sorted(files):
                    fp = Path(root) / f
                    if not _looks_binary(fp):
                        yield fp


def language_id_for(path: str | os.PathLike[str]) -> str:
    p = Path(path)
    name = p.name.lower()
    if name in SPECIAL_NAMES:
        return SPECIAL_NAMES[name]
    return LANGUAGE_IDS.get(p.suffix.lower(), "plaintext")


__all__ = [
    "iter_files",
    "read_text",
    "decode_bytes",
    "is_probably_text",
    "language_id_for",
    "ENCODING_CANDIDATES",
]
