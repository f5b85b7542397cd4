from japroof.segmenter import segment_sentences


def test_split_on_terminals(rough):
    text = "今日は晴れ。明日は雨！"
    sentences = segment_sentences(rough(text), text)
    assert [s.text for s in sentences] == ["今日は晴れ。", "明日は雨！"]
    assert sentences[1].start == 6


def test_trailing_text_without_terminal(rough):
    text = "一文目。二文目"
    sentences = segment_sentences(rough(text), text)
    assert [s.text for s in sentences] == ["一文目。", "二文目"]


def test_consecutive_terminals_stay_in_previous_sentence(rough):
    text = "本当？！次へ。"
    sentences = segment_sentences(rough(text), text)
    assert [s.text for s in sentences] == ["本当？！", "次へ。"]


def test_no_tokens_no_sentences():
    assert segment_sentences([], "") == []


def test_closing_bracket_after_terminal_joins_sentence(build):
    text = "彼は「はい。」と言った。"
    tokens = build(text, [
        "彼", ("は", "助詞"), ("「", "記号"), "はい", ("。", "記号"), ("」", "記号"),
        ("と", "助詞"), ("言っ", "動詞"), ("た", "助動詞"), ("。", "記号"),
    ])
    sentences = segment_sentences(tokens, text)
    assert [s.text for s in sentences] == ["彼は「はい。」", "と言った。"]


def test_closing_bracket_after_gap_starts_new_sentence(build):
    text = "終わり。 」"
    tokens = build(text, [("終わり", "名詞"), ("。", "記号"), ("」", "記号")])
    assert [s.text for s in segment_sentences(tokens, text)] == ["終わり。", "」"]
