"""高度ルールの設定。

設定は不変のスナップショットとして扱い、変更時は丸ごと差し替える。
TOML(pyproject.toml の [tool.japroof]) / YAML / JSON から読み込み、
未指定の項目は既定値のまま残す。キーは snake_case と camelCase の両方を受け付ける。
"""
from __future__ import annotations
import dataclasses
import json
import logging
import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from .external_rules import load_notation_file

LOGGER = logging.getLogger(__name__)

WEAK_EXPRESSION_LEVELS = ("strict", "normal", "loose")


@dataclass(frozen=True)
class AdvancedRulesConfig:
    # ルール有効/無効
    enable_style_consistency: bool = True
    enable_ra_nuki: bool = True
    enable_double_negation: bool = True
    enable_particle_repetition: bool = False
    enable_conjunction_repetition: bool = True
    enable_adversative_ga: bool = True
    enable_alphabet_width: bool = True
    enable_weak_expression: bool = True
    enable_comma_count: bool = True
    enable_term_notation: bool = True
    enable_kanji_opening: bool = True
    enable_redundant_expression: bool = True
    enable_tautology: bool = True
    enable_no_particle_chain: bool = True
    enable_monotonous_ending: bool = True
    enable_long_sentence: bool = True
    enable_sahen_verb: bool = True
    enable_missing_subject: bool = True
    enable_twisted_sentence: bool = True
    enable_homophone: bool = True
    enable_honorific_error: bool = True
    enable_adverb_agreement: bool = True
    enable_modifier_position: bool = True
    enable_ambiguous_demonstrative: bool = True
    enable_passive_overuse: bool = True
    enable_noun_chain: bool = True
    enable_conjunction_misuse: bool = True
    enable_okurigana_variant: bool = True
    enable_orthography_variant: bool = True
    enable_katakana_chouon: bool = True
    enable_number_width_mix: bool = True
    enable_halfwidth_kana: bool = True
    enable_numeral_style_mix: bool = True
    enable_space_around_unit: bool = True
    enable_bracket_quote_mismatch: bool = True
    enable_date_format_variant: bool = True
    enable_dash_tilde_normalization: bool = True
    enable_nakaguro_usage: bool = True
    enable_symbol_width_mix: bool = True
    # 技術用語辞書
    enable_web_tech_dictionary: bool = True
    enable_generative_ai_dictionary: bool = True
    enable_aws_dictionary: bool = True
    enable_azure_dictionary: bool = True
    enable_oci_dictionary: bool = True
    # 文書フィルタ
    enable_untitled_files: bool = True
    enable_content_based_detection: bool = True
    excluded_language_ids: Tuple[str, ...] = ()
    # しきい値
    comma_count_threshold: int = 4
    long_sentence_threshold: int = 120
    no_particle_chain_threshold: int = 3
    noun_chain_threshold: int = 5
    monotonous_ending_threshold: int = 3
    passive_overuse_threshold: int = 3
    passive_overuse_window: int = 5
    weak_expression_level: str = "normal"
    custom_notation_rules: Mapping[str, str] = field(default_factory=dict)
    max_document_length: int = 500_000

    def __post_init__(self):
        object.__setattr__(self, "custom_notation_rules", MappingProxyType(dict(self.custom_notation_rules)))
        object.__setattr__(self, "excluded_language_ids", tuple(self.excluded_language_ids))


DEFAULT_CONFIG = AdvancedRulesConfig()

_FIELDS = {f.name: f for f in dataclasses.fields(AdvancedRulesConfig)}

# 旧設定名との対応
_ALIASES = {
    "enableRaNukiDetection": "enable_ra_nuki",
    "enableGenerativeAIDictionary": "enable_generative_ai_dictionary",
    "enableAWSDictionary": "enable_aws_dictionary",
    "enableOCIDictionary": "enable_oci_dictionary",
}


def _snake(key: str) -> str:
    if key in _ALIASES:
        return _ALIASES[key]
    return re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", key).lower()


def _coerce(name: str, value: Any) -> Any:
    default = getattr(DEFAULT_CONFIG, name)
    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise ValueError(f"{name} must be a boolean, got {value!r}")
        return value
    if isinstance(default, int):
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValueError(f"{name} must be a positive integer, got {value!r}")
        return value
    if name == "weak_expression_level":
        if value not in WEAK_EXPRESSION_LEVELS:
            raise ValueError(f"weak_expression_level must be one of {WEAK_EXPRESSION_LEVELS}, got {value!r}")
        return value
    if name == "excluded_language_ids":
        if isinstance(value, str) or not isinstance(value, (list, tuple)):
            raise ValueError(f"excluded_language_ids must be a list, got {value!r}")
        return tuple(str(v) for v in value)
    if name == "custom_notation_rules":
        if not isinstance(value, Mapping):
            raise ValueError(f"custom_notation_rules must be a mapping, got {value!r}")
        return {str(k): str(v) for k, v in value.items()}
    return value


def config_from_mapping(
    mapping: Mapping[str, Any],
    base: AdvancedRulesConfig = DEFAULT_CONFIG,
    base_dir: Optional[Path] = None,
) -> AdvancedRulesConfig:
    """設定マッピングを base にマージした新しいスナップショットを返す。"""
    changes: Dict[str, Any] = {}
    notation_files = []
    for key, value in mapping.items():
        name = _snake(str(key))
        if name in ("custom_notation_file", "custom_notation_files"):
            notation_files.extend([value] if isinstance(value, str) else list(value))
            continue
        if name not in _FIELDS:
            LOGGER.warning("unknown configuration key ignored: %s", key)
            continue
        changes[name] = _coerce(name, value)
    if notation_files:
        rules = dict(changes.get("custom_notation_rules", base.custom_notation_rules))
        for nf in notation_files:
            p = Path(nf)
            if base_dir is not None and not p.is_absolute():
                p = base_dir / p
            rules.update(load_notation_file(str(p)))
        changes["custom_notation_rules"] = rules
    return dataclasses.replace(base, **changes)


def load_config(path: str | Path, base: AdvancedRulesConfig = DEFAULT_CONFIG) -> AdvancedRulesConfig:
    p = Path(path)
    suffix = p.suffix.lower()
    if suffix == ".toml":
        with p.open("rb") as f:
            data = tomllib.load(f)
        tool = data.get("tool", {}) if isinstance(data, dict) else {}
        section = tool.get("japroof", {}) if isinstance(tool, dict) else {}
    elif suffix in {".yaml", ".yml"}:
        section = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    else:
        section = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(section, Mapping):
        raise ValueError(f"設定は辞書形式である必要があります: {p}")
    return config_from_mapping(section, base=base, base_dir=p.parent)


__all__ = [
    "AdvancedRulesConfig",
    "DEFAULT_CONFIG",
    "WEAK_EXPRESSION_LEVELS",
    "config_from_mapping",
    "load_config",
]
