"""辞書引きで検出するルール。

見出し語(誤用・非推奨表記)と推奨表記の対応表を文書全体に照合する。
重なる一致は長い見出し語を優先する。語の区切りが曖昧な1文字語などは
トークンの品詞を確認してから照合する。
"""
from __future__ import annotations
import re
from typing import Dict, List, Optional, Sequence, Tuple

from ..detection import Hit, find_literals, longest_non_overlapping
from ..models import AdvancedDiagnostic, Severity, Token, is_verb
from .base import BaseRule, RuleContext

_KATAKANA = re.compile(r"[ァ-ヺー]")


def katakana_to_hiragana(text: str) -> str:
    return "".join(chr(ord(ch) - 0x60) if "ァ" <= ch <= "ヶ" else ch for ch in text)


class DictionaryRule(BaseRule):
    """対応表 entries をテキストに照合する共通実装。"""
    entries: Dict[str, str] = {}

    def message(self, variant: str, standard: str) -> str:
        return f"「{variant}」は「{standard}」と表記してください"

    def accept(self, text: str, start: int, end: int) -> bool:
        return True

    def find(self, context: RuleContext) -> List[Hit]:
        return find_literals(context.document_text, self.entries, accept=self.accept)

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        out: List[AdvancedDiagnostic] = []
        for h in self.find(context):
            standard = self.entries[h.key]
            out.append(self.diagnostic(
                context, h.start, h.end,
                self.message(h.key, standard),
                suggestions=[standard],
            ))
        return out


def _token_hits(tokens: Sequence[Token], table: Dict[str, Tuple[str, Tuple[str, ...]]]) -> List[Hit]:
    # table: 表層形 -> (推奨表記, 許容する品詞/品詞細分類)
    hits: List[Hit] = []
    for tok in tokens:
        entry = table.get(tok.surface)
        if entry is None:
            continue
        kana, tags = entry
        if tok.pos in tags or tok.pos_detail1 in tags:
            hits.append(Hit(tok.start, tok.end, tok.surface, kana))
    return hits


# ---------------------------------------------------------------------------
# 弱い表現

# (正規表現, 見出し, 言い換え, レベル)
WEAK_EXPRESSIONS: Tuple[Tuple[str, str, str, str], ...] = (
    (r"かもしれない", "かもしれない", "可能性がある", "normal"),
    (r"かもしれません", "かもしれません", "可能性があります", "normal"),
    (r"と思われる", "と思われる", "と考えられる", "normal"),
    (r"と思われます", "と思われます", "と考えられます", "normal"),
    (r"ような気がする", "ような気がする", "と推測される", "normal"),
    (r"ような気がします", "ような気がします", "と推測されます", "normal"),
    (r"気がする", "気がする", "と感じる", "strict"),
    (r"と思う(?!われ)", "と思う", "と考える", "strict"),
    (r"と思います(?!が)", "と思います", "と考えます", "strict"),
    (r"なんとなく", "なんとなく", "具体的な理由を述べる", "strict"),
    (r"多分", "多分", "おそらく", "loose"),
    (r"たぶん", "たぶん", "おそらく", "loose"),
    (r"一応", "一応", "念のため", "loose"),
)

_WEAK_COMPILED = tuple((re.compile(p), name, stronger, level) for p, name, stronger, level in WEAK_EXPRESSIONS)

WEAK_LEVEL_SEVERITY = {
    "strict": Severity.WARNING,
    "normal": Severity.INFORMATION,
    "loose": Severity.HINT,
}


def weak_patterns_for(level: str):
    if level == "strict":
        return _WEAK_COMPILED
    if level == "loose":
        return tuple(p for p in _WEAK_COMPILED if p[3] == "loose")
    return tuple(p for p in _WEAK_COMPILED if p[3] != "strict")


class WeakExpressionRule(BaseRule):
    name = "weak-expression"
    description = "弱い日本語表現を検出します"
    code = "weak-expression"
    config_flag = "enable_weak_expression"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        level = context.config.weak_expression_level
        stronger: Dict[str, str] = {}
        hits: List[Hit] = []
        for rx, name, alt, _ in weak_patterns_for(level):
            stronger[name] = alt
            for m in rx.finditer(context.document_text):
                hits.append(Hit(m.start(), m.end(), name, m.group(0)))
        out: List[AdvancedDiagnostic] = []
        for h in longest_non_overlapping(hits):
            out.append(self.diagnostic(
                context, h.start, h.end,
                f"「{h.key}」は曖昧な表現です。「{stronger[h.key]}」など断定的な表現を検討してください",
                suggestions=[stronger[h.key]],
                severity=WEAK_LEVEL_SEVERITY[level],
            ))
        return out


# ---------------------------------------------------------------------------
# 漢字の開き

KANJI_OPENINGS: Dict[str, str] = {
    "下さい": "ください",
    "下さる": "くださる",
    "頂く": "いただく",
    "頂き": "いただき",
    "頂ける": "いただける",
    "頂けれ": "いただけれ",
    "頂い": "いただい",
    "戴く": "いただく",
    "戴き": "いただき",
    "致します": "いたします",
    "致しました": "いたしました",
    "致す": "いたす",
    "参ります": "まいります",
    "参りました": "まいりました",
    "出来る": "できる",
    "出来ます": "できます",
    "出来ない": "できない",
    "出来ません": "できません",
    "出来た": "できた",
    "出来ました": "できました",
    "出来れば": "できれば",
    "出来て": "できて",
    "但し": "ただし",
    "又は": "または",
    "及び": "および",
    "並びに": "ならびに",
    "若しくは": "もしくは",
    "即ち": "すなわち",
    "予め": "あらかじめ",
    "概ね": "おおむね",
    "既に": "すでに",
    "直ぐ": "すぐ",
    "未だ": "いまだ",
    "殆ど": "ほとんど",
    "僅か": "わずか",
    "漸く": "ようやく",
    "有難う": "ありがとう",
    "御座います": "ございます",
    "御願い": "お願い",
    "宜しく": "よろしく",
    "沢山": "たくさん",
    "色々": "いろいろ",
    "様々": "さまざま",
    "是非": "ぜひ",
    "丁度": "ちょうど",
    "何故": "なぜ",
    "敢えて": "あえて",
}

# 文脈で意味が変わるものは品詞を確かめる
KANJI_OPENING_TOKENS: Dict[str, Tuple[str, Tuple[str, ...]]] = {
    "更に": ("さらに", ("副詞",)),
    "従って": ("したがって", ("接続詞",)),
    "尚": ("なお", ("接続詞", "副詞")),
    "又": ("また", ("接続詞", "副詞")),
    "事": ("こと", ("非自立",)),
    "物": ("もの", ("非自立",)),
    "所": ("ところ", ("非自立",)),
    "時": ("とき", ("非自立",)),
    "為": ("ため", ("非自立",)),
    "筈": ("はず", ("非自立",)),
    "訳": ("わけ", ("非自立",)),
    "様": ("よう", ("非自立",)),
}


class KanjiOpeningRule(DictionaryRule):
    name = "kanji-opening"
    description = "ひらがなで書くのが一般的な漢字表記を検出します"
    code = "kanji-opening"
    config_flag = "enable_kanji_opening"
    entries = KANJI_OPENINGS

    def message(self, variant: str, standard: str) -> str:
        return f"「{variant}」はひらがなで「{standard}」と書くのが一般的です"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        hits = self.find(context) + _token_hits(tokens, KANJI_OPENING_TOKENS)
        out: List[AdvancedDiagnostic] = []
        for h in longest_non_overlapping(hits):
            standard = KANJI_OPENINGS.get(h.key) or h.text
            out.append(self.diagnostic(context, h.start, h.end, self.message(h.key, standard), suggestions=[standard]))
        return out


# ---------------------------------------------------------------------------
# 冗長表現・重言

REDUNDANT_EXPRESSIONS: Dict[str, str] = {
    "することができる": "できる",
    "することができます": "できます",
    "することが可能です": "できます",
    "馬から落馬": "落馬",
    "後で後悔": "後悔",
    "一番最初": "最初",
    "各々それぞれ": "それぞれ",
    "過半数を超える": "過半数",
    "元旦の朝": "元旦",
    "炎天下の下": "炎天下",
    "射程距離": "射程",
    "製造メーカー": "メーカー",
    "最後の切り札": "切り札",
    "思いがけないハプニング": "ハプニング",
    "連日続く": "連日",
    "あらかじめ予約": "予約",
    "必ず必要": "必要",
    "全て全員": "全員",
    "今現在": "現在",
}


class RedundantExpressionRule(DictionaryRule):
    name = "redundant-expression"
    description = "冗長表現を検出します"
    code = "redundant-expression"
    config_flag = "enable_redundant_expression"
    entries = REDUNDANT_EXPRESSIONS

    def message(self, variant: str, standard: str) -> str:
        return f"「{variant}」は冗長です。「{standard}」で十分です"


TAUTOLOGIES: Dict[str, Tuple[str, ...]] = {
    "頭痛が痛い": ("頭が痛い", "頭痛がする"),
    "違和感を感じる": ("違和感がある", "違和感を覚える"),
    "被害を被る": ("被害を受ける", "被害にあう"),
    "犯罪を犯す": ("罪を犯す", "犯罪を行う"),
    "危険が危ない": ("危険がある", "危ない"),
    "まず最初に": ("最初に", "まず"),
    "歌を歌う": ("歌う", "歌を披露する"),
    "踊りを踊る": ("踊る", "踊りを披露する"),
    "話を話す": ("話す", "話をする"),
    "返事を返す": ("返事をする", "答える"),
    "日本に来日": ("来日する", "日本に来る"),
    "アメリカに渡米": ("渡米する", "アメリカに行く"),
    "電車に乗車": ("乗車する", "電車に乗る"),
    "車から下車": ("下車する", "車から降りる"),
    "いまだに未解決": ("未解決", "いまだに解決していない"),
}


class TautologyRule(BaseRule):
    name = "tautology"
    description = "重言(同じ意味の語の重複)を検出します"
    code = "tautology"
    config_flag = "enable_tautology"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        out: List[AdvancedDiagnostic] = []
        for h in find_literals(context.document_text, TAUTOLOGIES):
            alts = TAUTOLOGIES[h.key]
            out.append(self.diagnostic(
                context, h.start, h.end,
                f"重言「{h.key}」: 同じ意味の語が重なっています",
                suggestions=alts,
            ))
        return out


# ---------------------------------------------------------------------------
# ねじれ文

TWISTED_PHRASES: Dict[str, str] = {
    "私の夢は医者になりたいです": "私の夢は医者になることです",
    "彼の特技は絵を上手です": "彼の特技は絵を描くことです",
    "私の趣味は映画を見たいです": "私の趣味は映画を見ることです",
    "私の目標は成功したいです": "私の目標は成功することです",
    "私の希望は合格したいです": "私の希望は合格することです",
}

TWISTED_PATTERNS = (
    (re.compile(r"(夢|目標|希望|願い)は[^。！？]*たいです"), "「〜は」と「〜たいです」が対応していません。「〜は〜ことです」の形を検討してください"),
    (re.compile(r"(理由|原因)は[^。！？]*から(です)?$"), "「理由は」と「〜から」が重複しています。「〜ためです」などを検討してください"),
)


class TwistedSentenceRule(BaseRule):
    name = "twisted-sentence"
    description = "ねじれ文(主語と述語の不対応)を検出します"
    code = "twisted-sentence"
    config_flag = "enable_twisted_sentence"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        out: List[AdvancedDiagnostic] = []
        fixed = find_literals(context.document_text, TWISTED_PHRASES)
        for h in fixed:
            out.append(self.diagnostic(
                context, h.start, h.end,
                "主語と述語が対応していません(ねじれ文)",
                suggestions=[TWISTED_PHRASES[h.key]],
            ))
        covered = [(h.start, h.end) for h in fixed]
        for s in context.sentences:
            body = s.text.rstrip("。！？!? \n")
            for rx, explanation in TWISTED_PATTERNS:
                m = rx.search(body)
                if not m:
                    continue
                start, end = s.start + m.start(), s.start + m.end()
                if any(start < e and end > b for b, e in covered):
                    continue
                out.append(self.diagnostic(context, start, end, explanation))
                break
        out.sort(key=lambda d: (d.start, d.end))
        return out


# ---------------------------------------------------------------------------
# 同音異義語

HOMOPHONES: Dict[str, Tuple[Tuple[str, ...], str]] = {
    "意志が低い": (("意識が低い", "志が低い"), "「意志」は決意、「意識」は認識や自覚を表します"),
    "異動の制約": (("移動の制約",), "物理的な移動には「移動」を使います"),
    "移動の辞令": (("異動の辞令",), "人事には「異動」を使います"),
    "以外に多い": (("意外に多い",), "予想外を表す場合は「意外」を使います"),
    "意外の人": (("以外の人",), "「〜を除いて」を表す場合は「以外」を使います"),
    "過程が良い": (("家庭が良い",), "家族関係を表す場合は「家庭」を使います"),
    "家庭で作る": (("過程で作る",), "プロセスを表す場合は「過程」を使います"),
    "保証を求める": (("補償を求める",), "損害の埋め合わせには「補償」を使います"),
    "対象的": (("対照的",), "違いが際立つ様子は「対照的」です"),
}


class HomophoneRule(BaseRule):
    name = "homophone"
    description = "同音異義語の誤用を検出します"
    code = "homophone"
    config_flag = "enable_homophone"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        out: List[AdvancedDiagnostic] = []
        for h in find_literals(context.document_text, HOMOPHONES):
            correct, explanation = HOMOPHONES[h.key]
            out.append(self.diagnostic(
                context, h.start, h.end,
                f"同音異義語の誤用の可能性があります: 「{h.key}」。{explanation}",
                suggestions=correct,
            ))
        return out


# ---------------------------------------------------------------------------
# 敬語の誤用

_HONORIFIC_STEMS = (
    "ご覧", "お見え", "お越し", "お帰り", "お召し上がり", "ご利用", "お読み", "お書き", "お聞き",
)


def _double_honorifics() -> Dict[str, str]:
    table = {
        "おっしゃられる": "おっしゃる",
        "おっしゃられた": "おっしゃった",
        "おっしゃられました": "おっしゃいました",
        "おっしゃられます": "おっしゃいます",
    }
    for stem in _HONORIFIC_STEMS:
        table[f"{stem}になられる"] = f"{stem}になる"
        table[f"{stem}になられた"] = f"{stem}になった"
        table[f"{stem}になられました"] = f"{stem}になりました"
        table[f"{stem}になられます"] = f"{stem}になります"
    return table


DOUBLE_HONORIFICS: Dict[str, str] = _double_honorifics()

# 謙譲語を相手の動作に使う誤り
HUMBLE_MISUSE: Dict[str, str] = {
    "拝見される": "ご覧になる",
    "拝見されました": "ご覧になりました",
    "申される": "おっしゃる",
    "申されました": "おっしゃいました",
    "参られる": "いらっしゃる",
    "参られました": "いらっしゃいました",
    "伺われる": "お聞きになる",
    "いただかれる": "召し上がる",
}


class HonorificErrorRule(BaseRule):
    name = "honorific-error"
    description = "敬語の誤用(二重敬語など)を検出します"
    code = "honorific-error"
    config_flag = "enable_honorific_error"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        table = dict(DOUBLE_HONORIFICS)
        table.update(HUMBLE_MISUSE)
        out: List[AdvancedDiagnostic] = []
        for h in find_literals(context.document_text, table):
            if h.key in HUMBLE_MISUSE:
                msg = f"「{h.key}」は謙譲語を相手の動作に使っています。「{table[h.key]}」が適切です"
            else:
                msg = f"「{h.key}」は二重敬語です。「{table[h.key]}」で十分です"
            out.append(self.diagnostic(context, h.start, h.end, msg, suggestions=[table[h.key]]))
        return out


# ---------------------------------------------------------------------------
# 修飾語の位置

MODIFIER_ORDER: Dict[str, Tuple[str, str]] = {
    "赤い大きな": ("大きな赤い", "修飾語は「大きさ」→「色」の順序が自然です"),
    "青い小さな": ("小さな青い", "修飾語は「大きさ」→「色」の順序が自然です"),
    "白い大きな": ("大きな白い", "修飾語は「大きさ」→「色」の順序が自然です"),
    "黒い小さな": ("小さな黒い", "修飾語は「大きさ」→「色」の順序が自然です"),
    "古い素敵な": ("素敵な古い", "主観的な修飾語は客観的な修飾語の前に置くのが自然です"),
    "新しい素晴らしい": ("素晴らしい新しい", "主観的な修飾語は客観的な修飾語の前に置くのが自然です"),
}

AMBIGUOUS_MODIFIERS: Dict[str, str] = {
    "美しい女性の写真": "「美しい」が「女性」と「写真」のどちらを修飾するか曖昧です",
    "大きな子供の靴": "「大きな」が「子供」と「靴」のどちらを修飾するか曖昧です",
    "新しい社員の机": "「新しい」が「社員」と「机」のどちらを修飾するか曖昧です",
}


class ModifierPositionRule(BaseRule):
    name = "modifier-position"
    description = "修飾語の位置による曖昧さを検出します"
    code = "modifier-position"
    config_flag = "enable_modifier_position"
    severity = Severity.INFORMATION

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        keys = list(MODIFIER_ORDER) + list(AMBIGUOUS_MODIFIERS)
        out: List[AdvancedDiagnostic] = []
        for h in find_literals(context.document_text, keys):
            if h.key in MODIFIER_ORDER:
                fixed, explanation = MODIFIER_ORDER[h.key]
                out.append(self.diagnostic(context, h.start, h.end, explanation, suggestions=[fixed]))
            else:
                out.append(self.diagnostic(context, h.start, h.end, AMBIGUOUS_MODIFIERS[h.key]))
        return out


# ---------------------------------------------------------------------------
# 接続詞の誤用

CONJUNCTION_MISUSES: Dict[str, Tuple[str, str]] = {
    "晴れた。しかし、外出した": ("晴れた。そこで、外出した", "「しかし」は逆接です。順接の関係には「そこで」「だから」が適切です"),
    "忙しい。だから、暇だ": ("忙しい。しかし、暇だ", "「だから」は順接です。矛盾する内容には「しかし」「けれども」が適切です"),
    "雨だ。だから、傘を持たない": ("雨だ。しかし、傘を持たない", "「だから」は順接です。逆の行動には「しかし」「けれども」が適切です"),
    "成功した。しかし、嬉しい": ("成功した。だから、嬉しい", "「しかし」は逆接です。順接の関係には「だから」「そのため」が適切です"),
}


class ConjunctionMisuseRule(BaseRule):
    name = "conjunction-misuse"
    description = "接続詞の誤用を検出します"
    code = "conjunction-misuse"
    config_flag = "enable_conjunction_misuse"

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        out: List[AdvancedDiagnostic] = []
        for h in find_literals(context.document_text, CONJUNCTION_MISUSES):
            fixed, explanation = CONJUNCTION_MISUSES[h.key]
            out.append(self.diagnostic(context, h.start, h.end, explanation, suggestions=[fixed]))
        return out


# ---------------------------------------------------------------------------
# 送り仮名・表記の揺れ

OKURIGANA_VARIANTS: Dict[str, str] = {
    "表わす": "表す",
    "表わし": "表し",
    "表わせ": "表せ",
    "現わす": "現す",
    "現わし": "現し",
    "現われ": "現れ",
    "行なう": "行う",
    "行ない": "行い",
    "行なえ": "行え",
    "行なわ": "行わ",
    "行なっ": "行っ",
    "著わす": "著す",
    "断わる": "断る",
    "断わり": "断り",
    "断わっ": "断っ",
    "当る": "当たる",
    "当り": "当たり",
    "落す": "落とす",
    "落し": "落とし",
    "果す": "果たす",
    "果し": "果たし",
    "起る": "起こる",
    "起り": "起こり",
    "終る": "終わる",
    "終り": "終わり",
    "変る": "変わる",
    "変り": "変わり",
    "代る": "代わる",
    "代り": "代わり",
    "生れる": "生まれる",
    "生れ": "生まれ",
    "捕える": "捕らえる",
    "捕え": "捕らえ",
    "著るしい": "著しい",
    "著るしく": "著しく",
    "危い": "危ない",
    "危く": "危なく",
    "少い": "少ない",
    "少く": "少なく",
    "売上げ": "売り上げ",
    "取扱い": "取り扱い",
    "受付け": "受け付け",
    "申込み": "申し込み",
    "引越し": "引っ越し",
    "読物": "読み物",
    "贈物": "贈り物",
    "届出る": "届け出る",
}


class OkuriganaVariantRule(DictionaryRule):
    name = "okurigana-variant"
    description = "送り仮名の揺れを検出します"
    code = "okurigana-variant"
    config_flag = "enable_okurigana_variant"
    entries = OKURIGANA_VARIANTS

    def message(self, variant: str, standard: str) -> str:
        return f"送り仮名「{variant}」は「{standard}」が標準的な表記です"


ORTHOGRAPHY_VARIANTS: Dict[str, str] = {
    "有る": "ある",
    "有り": "あり",
    "有ります": "あります",
    "有った": "あった",
    "有れば": "あれば",
    "無い": "ない",
    "無く": "なく",
    "無かった": "なかった",
    "無ければ": "なければ",
    "成る": "なる",
    "成ります": "なります",
    "或いは": "あるいは",
    "因みに": "ちなみに",
    "迄": "まで",
}

# 「〜て見る」「〜て置く」などの補助動詞
AUXILIARY_VERBS = ("見る", "置く", "居る", "行く", "来る", "貰う", "頂く", "上げる", "下さる", "仕舞う")


def _auxiliary_verb_hits(tokens: Sequence[Token]) -> List[Hit]:
    hits: List[Hit] = []
    for prev, tok in zip(tokens, tokens[1:]):
        if prev.surface not in ("て", "で") or not is_verb(tok):
            continue
        if tok.base_form not in AUXILIARY_VERBS or not tok.reading or prev.end != tok.start:
            continue
        kana = katakana_to_hiragana(tok.reading)
        if kana != tok.surface:
            hits.append(Hit(tok.start, tok.end, tok.surface, kana))
    return hits


class OrthographyVariantRule(DictionaryRule):
    name = "orthography-variant"
    description = "ひらがな表記が推奨される語の漢字表記を検出します"
    code = "orthography-variant"
    config_flag = "enable_orthography_variant"
    entries = ORTHOGRAPHY_VARIANTS

    def accept(self, text: str, start: int, end: int) -> bool:
        # 1文字の語は前後が漢字なら熟語の一部
        if end - start > 1:
            return True
        before = text[start - 1] if start > 0 else ""
        after = text[end] if end < len(text) else ""
        return not (_is_kanji(before) or _is_kanji(after))

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        hits = self.find(context) + _auxiliary_verb_hits(tokens)
        out: List[AdvancedDiagnostic] = []
        for h in longest_non_overlapping(hits):
            standard = ORTHOGRAPHY_VARIANTS.get(h.key) or h.text
            out.append(self.diagnostic(
                context, h.start, h.end,
                f"「{h.key}」はひらがなで「{standard}」と書くことが推奨されます",
                suggestions=[standard],
            ))
        return out


def _is_kanji(ch: str) -> bool:
    return bool(ch) and ("一" <= ch <= "鿿" or ch == "々")


KATAKANA_CHOUON: Dict[str, str] = {
    "サーバ": "サーバー",
    "コンピュータ": "コンピューター",
    "ユーザ": "ユーザー",
    "ブラウザ": "ブラウザー",
    "フォルダ": "フォルダー",
    "プリンタ": "プリンター",
    "スキャナ": "スキャナー",
    "モニタ": "モニター",
    "ルータ": "ルーター",
    "コントローラ": "コントローラー",
    "マネージャ": "マネージャー",
    "ドライバ": "ドライバー",
    "メモリ": "メモリー",
    "カテゴリ": "カテゴリー",
    "エントリ": "エントリー",
    "ディレクトリ": "ディレクトリー",
    "ライブラリ": "ライブラリー",
    "レジストリ": "レジストリー",
    "ファクトリ": "ファクトリー",
    "バッテリ": "バッテリー",
    "プロパティ": "プロパティー",
    "セキュリティ": "セキュリティー",
    "ユーティリティ": "ユーティリティー",
    "スケジューラ": "スケジューラー",
    "ハンドラ": "ハンドラー",
    "コンパイラ": "コンパイラー",
    "デバッガ": "デバッガー",
    "エディタ": "エディター",
    "オペレータ": "オペレーター",
    "イテレータ": "イテレーター",
    "ジェネレータ": "ジェネレーター",
    "シミュレータ": "シミュレーター",
    "エミュレータ": "エミュレーター",
    "センサ": "センサー",
    "プロセッサ": "プロセッサー",
    "レジスタ": "レジスター",
    "フィルタ": "フィルター",
    "アダプタ": "アダプター",
    "コネクタ": "コネクター",
    "コンバータ": "コンバーター",
    "スピーカ": "スピーカー",
    "プレイヤ": "プレイヤー",
    "レイヤ": "レイヤー",
    "パラメタ": "パラメーター",
    "パラメータ": "パラメーター",
    "カウンタ": "カウンター",
    "ポインタ": "ポインター",
    "キャラクタ": "キャラクター",
    "セパレータ": "セパレーター",
    "マーカ": "マーカー",
    "トリガ": "トリガー",
    "ホルダ": "ホルダー",
    "ローダ": "ローダー",
    "リーダ": "リーダー",
    "ヘルパ": "ヘルパー",
    "ワーカ": "ワーカー",
    "パーサ": "パーサー",
    "レンダラ": "レンダラー",
    "ビルダ": "ビルダー",
    "ランナ": "ランナー",
    "デザイナ": "デザイナー",
    "コンテナ": "コンテナー",
    "リスナ": "リスナー",
    "オーナ": "オーナー",
    "パートナ": "パートナー",
    "メンバ": "メンバー",
    "ナンバ": "ナンバー",
    "メイル": "メール",
}


class KatakanaChouonRule(DictionaryRule):
    name = "katakana-chouon"
    description = "カタカナ語の長音符の揺れを検出します"
    code = "katakana-chouon"
    config_flag = "enable_katakana_chouon"
    entries = KATAKANA_CHOUON

    def accept(self, text: str, start: int, end: int) -> bool:
        # 後ろにカタカナや長音符が続く場合は別の語か長音付きの表記
        return not (end < len(text) and _KATAKANA.match(text[end]))

    def message(self, variant: str, standard: str) -> str:
        return f"カタカナ語「{variant}」は語末の長音符を付けて「{standard}」と表記してください"


__all__ = [
    "DictionaryRule",
    "WeakExpressionRule",
    "KanjiOpeningRule",
    "RedundantExpressionRule",
    "TautologyRule",
    "TwistedSentenceRule",
    "HomophoneRule",
    "HonorificErrorRule",
    "ModifierPositionRule",
    "ConjunctionMisuseRule",
    "OkuriganaVariantRule",
    "OrthographyVariantRule",
    "KatakanaChouonRule",
    "katakana_to_hiragana",
    "weak_patterns_for",
]
