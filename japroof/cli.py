from __future__ import annotations
import argparse
import dataclasses
import json
import logging
import sys
from typing import Any, Dict, List, Optional, Tuple

from .config import DEFAULT_CONFIG, AdvancedRulesConfig, load_config
from .errors import AppError
from .external_rules import load_notation_file
from .file_scanner import iter_files, language_id_for, read_text
from .lookup import WikipediaClient
from .models import AdvancedDiagnostic, Severity
from .morph import Tokenizer, is_available as morph_available
from .rules import default_rules
from .session import AnalysisSession

SEVERITY_CHOICES = ["error", "warning", "information", "hint"]


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="japroof",
        description="日本語の文章・コード中のコメントや文字列を校閲し、文法・文体・表記の問題を報告します"
    )
    p.add_argument("paths", nargs="+", help="走査するファイル/ディレクトリ")
    p.add_argument("--json", action="store_true", help="JSONで出力")
    p.add_argument("--config", help="設定ファイル(pyproject.toml の [tool.japroof] / YAML / JSON)")
    p.add_argument("--rules", action="append", metavar="FILE", help="追加の表記ルールファイル(YAML/JSON、複数指定は繰り返し)")
    p.add_argument("--enable", action="append", default=[], metavar="RULE", help="ルールを有効化 (例: particle-repetition)")
    p.add_argument("--disable", action="append", default=[], metavar="RULE", help="ルールを無効化")
    p.add_argument("--jobs", type=int, default=1, help="並列実行のワーカー数")
    p.add_argument("--min-severity", choices=SEVERITY_CHOICES, default="hint", help="この重大度未満を非表示にします (既定: hint)")
    p.add_argument("--fail-on-issue", action="store_true", help="問題が1件でもあれば終了コード1")
    p.add_argument("--lookup", action="store_true", help="Wikipedia で技術用語の正式表記を確認する(要ネットワーク)")
    p.add_argument("--verbose", "-v", action="store_true", help="デバッグログを表示")
    return p


def _offset_to_linecol(text: str, idx: int) -> Tuple[int, int]:
    # 1-based line/col
    line = text.count("\n", 0, idx) + 1
    last_nl = text.rfind("\n", 0, idx)
    col = idx - last_nl
    return line, col


def _apply_toggles(config: AdvancedRulesConfig, enable: List[str], disable: List[str]) -> AdvancedRulesConfig:
    flags = {r.name: r.config_flag for r in default_rules()}
    changes: Dict[str, bool] = {}
    for names, value in ((enable, True), (disable, False)):
        for name in names:
            if name not in flags:
                raise ValueError(f"unknown rule: {name}")
            changes[flags[name]] = value
    return dataclasses.replace(config, **changes) if changes else config


def _resolve_config(args) -> AdvancedRulesConfig:
    config = load_config(args.config) if args.config else DEFAULT_CONFIG
    if args.rules:
        extra = dict(config.custom_notation_rules)
        for rf in args.rules:
            extra.update(load_notation_file(rf))
        config = dataclasses.replace(config, custom_notation_rules=extra)
    return _apply_toggles(config, args.enable, args.disable)


def _format(path: str, text: str, d: AdvancedDiagnostic) -> str:
    line, col = _offset_to_linecol(text, d.start)
    msg = f"{path}:{line}:{col}: [{d.severity.name.lower()}] {d.message}"
    extra = []
    if d.suggestions:
        extra.append("suggest: " + ", ".join(d.suggestions))
    extra.append(f"rule: {d.code}")
    return msg + " | " + " | ".join(extra)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    try:
        config = _resolve_config(args)
    except (OSError, ValueError, AppError) as e:
        print(f"[warn] failed to load config: {e}", file=sys.stderr)
        return 2
    if not morph_available():
        print("[warn] 形態素解析器(fugashi/janome) が見つかりません。janome をインストールしてください。", file=sys.stderr)
        return 2

    lookup = WikipediaClient() if args.lookup else None
    failed = False
    rows: List[Tuple[str, str, AdvancedDiagnostic]] = []
    min_severity = Severity.parse(args.min_severity)
    try:
        with AnalysisSession(tokenizer=Tokenizer(), config=config, lookup=lookup, workers=max(1, args.jobs)) as session:
            jobs = []
            for path in iter_files(args.paths):
                try:
                    text = read_text(path, max_bytes=config.max_document_length * 4)
                except (OSError, AppError) as e:
                    print(f"[warn] {path}: {e}", file=sys.stderr)
                    failed = True
                    continue
                uri = str(path.resolve())
                jobs.append((uri, text, session.submit(uri, 1, text, language_id_for(path))))
            for uri, text, fut in jobs:
                analysis = fut.result()
                if analysis.failed:
                    print(f"[warn] {uri}: {analysis.error}", file=sys.stderr)
                    failed = True
                    continue
                for res in analysis.rule_results:
                    if not res.success:
                        print(f"[warn] {uri}: rule {res.rule_name} failed: {res.error}", file=sys.stderr)
                for d in analysis.diagnostics:
                    if d.severity <= min_severity:
                        rows.append((uri, text, d))
    finally:
        if lookup is not None:
            lookup.close()

    if args.json:
        data: List[Dict[str, Any]] = []
        for uri, _text, d in rows:
            item = {"file": uri}
            item.update(d.to_dict())
            data.append(item)
        print(json.dumps(data, ensure_ascii=False, indent=2))
    elif not rows:
        print("No issues found.")
    else:
        for uri, text, d in rows:
            print(_format(uri, text, d))
        print(f"Total: {len(rows)} issue(s)")
    if failed:
        return 2
    if args.fail_on_issue and rows:
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
