"""
Unit tests for the markup tokenizer.
"""

from tuimark.markup.tokenizer import (
    EOF,
    TAG_CLOSE,
    TAG_OPEN,
    TAG_SELF_CLOSE,
    TEXT,
    parse_expression,
    parse_props,
    parse_style_object,
    split_top_level,
    tokenize,
)


def types(tokens):
    return [t.type for t in tokens]


class TestTokenize:
    def test_open_text_close(self):
        tokens = tokenize('<text name="Title">Hello</text>')
        assert types(tokens) == [TAG_OPEN, TEXT, TAG_CLOSE, EOF]
        assert tokens[0].name == "text"
        assert tokens[0].props == {"name": "Title"}
        assert tokens[1].content == "Hello"
        assert tokens[2].name == "text"

    def test_self_closing(self):
        tokens = tokenize("<input />")
        assert types(tokens) == [TAG_SELF_CLOSE, EOF]
        assert tokens[0].name == "input"
        assert tokens[0].props == {}

    def test_self_closing_without_space(self):
        tokens = tokenize('<input name="x"/>')
        assert tokens[0].type == TAG_SELF_CLOSE
        assert tokens[0].props == {"name": "x"}

    def test_hyphenated_tag_name(self):
        assert tokenize("<tab-select />")[0].name == "tab-select"

    def test_whitespace_runs_dropped(self):
        tokens = tokenize("<box>\n   \n</box>")
        assert types(tokens) == [TAG_OPEN, TAG_CLOSE, EOF]

    def test_text_trimmed(self):
        tokens = tokenize("<text>   two words  </text>")
        assert tokens[1].content == "two words"

    def test_empty_input_is_just_eof(self):
        assert types(tokenize("")) == [EOF]

    def test_gt_inside_braces_does_not_end_tag(self):
        tokens = tokenize('<box style={{ width: 10 }} title="a>b">x</box>')
        assert tokens[0].props["style"] == {"width": 10}
        assert tokens[0].props["title"] == "a>b"
        assert tokens[1].content == "x"

    def test_unterminated_tag_still_tokenizes(self):
        tokens = tokenize("<box")
        assert types(tokens) == [TAG_OPEN, EOF]
        assert tokens[0].name == "box"

    def test_template_literal_with_apostrophe(self):
        tokens = tokenize("<box title={`it's`} /><text>ok</text>")
        assert types(tokens) == [TAG_SELF_CLOSE, TAG_OPEN, TEXT, TAG_CLOSE, EOF]
        assert tokens[0].props == {"title": "`it's`"}
        assert tokens[2].content == "ok"

    def test_apostrophe_in_raw_expression(self):
        tokens = tokenize("<box title={it's} /><input />")
        assert types(tokens) == [TAG_SELF_CLOSE, TAG_SELF_CLOSE, EOF]
        assert tokens[0].props == {"title": "it's"}

    def test_quotes_still_protect_values(self):
        tokens = tokenize("""<box title="don't > stop" style={{ flexDirection: "row" }} />""")
        assert tokens[0].props == {"title": "don't > stop", "style": {"flexDirection": "row"}}

    def test_nested_elements(self):
        tokens = tokenize('<box><text>a</text><input /></box>')
        assert types(tokens) == [TAG_OPEN, TAG_OPEN, TEXT, TAG_CLOSE, TAG_SELF_CLOSE, TAG_CLOSE, EOF]


class TestParseProps:
    def test_bare_attribute_is_true(self):
        assert parse_props(" border") == {"border": True}

    def test_quoted_values(self):
        assert parse_props(""" a="one" b='two' """) == {"a": "one", "b": "two"}

    def test_quoted_value_keeps_other_quote(self):
        assert parse_props(""" title='say "hi"' """) == {"title": 'say "hi"'}

    def test_braced_values(self):
        props = parse_props(" visible={false} value={50} ratio={0.5}")
        assert props == {"visible": False, "value": 50, "ratio": 0.5}

    def test_border_sides(self):
        assert parse_props(' border={["top", "bottom"]}') == {"border": ["top", "bottom"]}

    def test_rgba_color(self):
        assert parse_props(' color={RGBA.fromHex("#ff8800")}') == {"color": "#ff8800"}

    def test_options_records(self):
        props = parse_props(' options={[{ name: "Option 1", value: "option_1" }, { name: "B", value: "b" }]}')
        assert props["options"] == [
            {"name": "Option 1", "value": "option_1"},
            {"name": "B", "value": "b"},
        ]

    def test_mixed_bare_and_valued(self):
        props = parse_props(' dim name="x" strikethrough')
        assert props == {"dim": True, "name": "x", "strikethrough": True}

    def test_unquoted_value(self):
        assert parse_props(" width=10") == {"width": 10}


class TestExpressions:
    def test_style_object(self):
        style = parse_style_object('{ width: "50%", height: 3, flexDirection: "row" }')
        assert style == {"width": "50%", "height": 3, "flexDirection": "row"}

    def test_style_entry_without_colon_skipped(self):
        assert parse_style_object("{ width: 1, bogus }") == {"width": 1}

    def test_split_respects_nesting_and_quotes(self):
        assert split_top_level('a, [b, c], "d,e"') == ["a", "[b, c]", '"d,e"']

    def test_split_ignores_apostrophe_inside_word(self):
        assert split_top_level("it's, b") == ["it's", "b"]

    def test_booleans_and_numbers(self):
        assert parse_expression("true") is True
        assert parse_expression("false") is False
        assert parse_expression("-3") == -3
        assert parse_expression("1.25") == 1.25

    def test_unknown_expression_kept_raw(self):
        assert parse_expression(" someVariable ") == "someVariable"
