"""ルール実行器。

登録順にルールを実行し、ルールごとに RuleResult を1件返す。
あるルールが例外を送出しても、そのルールを失敗として記録して次へ進む。
jobs > 1 のときはスレッドプールで並列に実行するが、結果は登録順のまま返す。
"""
from __future__ import annotations
import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Sequence

from .models import RuleResult, Token
from .rules.base import Rule, RuleContext

LOGGER = logging.getLogger(__name__)


def run_rule(rule: Rule, tokens: Sequence[Token], context: RuleContext) -> RuleResult:
    result = RuleResult(rule_name=rule.name)
    started = time.perf_counter()
    try:
        result.diagnostics = list(rule.check(tokens, context))
    except Exception as e:
        result.set_error(e)
        LOGGER.warning("rule %s failed: %s", rule.name, e)
    result.execution_time = (time.perf_counter() - started) * 1000.0
    LOGGER.debug("rule %s: %d diagnostic(s) in %.2f ms", rule.name, len(result.diagnostics), result.execution_time)
    return result


class RuleExecutor:
    def __init__(self, rules: Iterable[Rule], jobs: int = 1):
        self.rules = tuple(rules)
        self.jobs = max(1, jobs)

    def run(self, tokens: Sequence[Token], context: RuleContext) -> List[RuleResult]:
        enabled = [r for r in self.rules if r.is_enabled(context.config)]
        return self._execute(enabled, tokens, context)

    def run_selected(self, names: Iterable[str], tokens: Sequence[Token], context: RuleContext) -> List[RuleResult]:
        """指定した名前のルールだけを実行する。順序は登録順、有効/無効の設定は見ない。"""
        wanted = set(names)
        unknown = wanted - {r.name for r in self.rules}
        if unknown:
            LOGGER.warning("unknown rule name(s): %s", ", ".join(sorted(unknown)))
        selected = [r for r in self.rules if r.name in wanted]
        return self._execute(selected, tokens, context)

    def _execute(self, rules: Sequence[Rule], tokens: Sequence[Token], context: RuleContext) -> List[RuleResult]:
        if self.jobs == 1 or len(rules) < 2:
            return [run_rule(r, tokens, context) for r in rules]
        with ThreadPoolExecutor(max_workers=self.jobs) as ex:
            futs = [ex.submit(run_rule, r, tokens, context) for r in rules]
            return [f.result() for f in futs]

    @property
    def rule_names(self) -> List[str]:
        return [r.name for r in self.rules]


__all__ = ["RuleExecutor", "run_rule"]
