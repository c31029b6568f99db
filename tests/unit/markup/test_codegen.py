"""
Unit tests for the markup code generator.
"""

import pytest
from tuimark.config import reset_config
from tuimark.dom import AsciiFont, Box, Input, Scrollbox, Select, Slider, Text, make_root
from tuimark.markup.codegen import format_text_content, generate_children_code, generate_code


class TestDefaultsOmitted:
    def test_all_default_node_only_has_name(self):
        assert generate_code(Input(id="el-1")) == '<input name="Input" />'

    def test_explicit_name_kept(self):
        assert generate_code(Box(id="el-1", name="Panel")) == '<box name="Panel" />'

    def test_default_valued_fields_not_written(self):
        node = Select(id="el-1", fast_scroll_step=5, visible=True, wrap_selection=False)
        assert generate_code(node) == '<select name="Select" />'

    def test_empty_text(self):
        assert generate_code(Text(id="el-1")) == '<text name="Text"></text>'


class TestAttributes:
    def test_style_and_tag_attributes(self):
        node = Box(id="el-1", name="P", border=True, background_color="#000", width=10, height="50%")
        assert generate_code(node) == (
            '<box name="P" border backgroundColor="#000" style={{ width: 10, height: "50%" }} />'
        )

    def test_style_key_order(self):
        node = Box(
            id="el-1", overflow="hidden", x=3, margin=1, padding=2,
            flex_grow=1, flex_direction="row", width=1,
        )
        assert generate_code(node) == (
            '<box name="Box" style={{ width: 1, flexDirection: "row", flexGrow: 1, '
            'padding: 2, margin: 1, left: 3, overflow: "hidden" }} />'
        )

    def test_integral_floats_written_as_ints(self):
        assert "width: 2 " in generate_code(Box(id="el-1", width=2.0))

    def test_border_sides(self):
        node = Box(id="el-1", border=True, border_sides=("top", "bottom"))
        assert generate_code(node) == '<box name="Box" border={["top", "bottom"]} />'

    def test_booleans(self):
        node = Scrollbox(id="el-1", sticky_scroll=True, scroll_y=False, visible=False)
        assert generate_code(node) == '<scrollbox name="Scrollbox" stickyScroll scrollY={false} visible={false} />'

    def test_options_with_normalized_value(self):
        node = Select(id="el-1", options=("Option 1", "B"))
        assert generate_code(node) == (
            '<select name="Select" options={[{ name: "Option 1", value: "option_1" }, '
            '{ name: "B", value: "b" }]} />'
        )

    def test_numbers_in_braces(self):
        node = Slider(id="el-1", value=50, min=0, max=100)
        assert generate_code(node) == '<slider name="Slider" value={50} min={0} max={100} />'

    def test_rgba_color(self):
        node = AsciiFont(id="el-1", text="Hi", color="#4da8da")
        assert generate_code(node) == '<ascii-font name="Ascii-font" text="Hi" color={RGBA.fromHex("#4da8da")} />'

    def test_double_quote_in_value_uses_single_quotes(self):
        assert generate_code(Input(id="el-1", name='say "hi"')) == """<input name='say "hi"' />"""

    def test_non_finite_numbers_skipped(self):
        node = Slider(id="el-1", value=float("inf"), max=100, width=float("nan"))
        assert generate_code(node) == '<slider name="Slider" max={100} />'

    def test_empty_strings_skipped(self):
        assert generate_code(Input(id="el-1", placeholder="")) == '<input name="Input" />'


class TestTextFormatting:
    def test_plain(self):
        assert format_text_content(Text(id="el-1", content="Hi")) == "Hi"

    def test_bold_italic_underline(self):
        node = Text(id="el-1", content="Hi", bold=True, italic=True, underline=True)
        assert format_text_content(node) == "<u><strong><em>Hi</em></strong></u>"

    def test_single_flags(self):
        assert format_text_content(Text(id="el-1", content="a", bold=True)) == "<strong>a</strong>"
        assert format_text_content(Text(id="el-1", content="a", italic=True)) == "<em>a</em>"

    def test_span_wrappers_outermost(self):
        node = Text(id="el-1", content="x", bold=True, dim=True, strikethrough=True)
        assert format_text_content(node) == (
            "<span strikethrough><span dim><strong>x</strong></span></span>"
        )

    def test_line_breaks(self):
        assert format_text_content(Text(id="el-1", content="a\nb")) == "a<br />b"

    def test_text_element(self):
        node = Text(id="el-1", name="Label", content="Hi", fg="#fff", bold=True)
        assert generate_code(node) == '<text name="Label" fg="#fff"><strong>Hi</strong></text>'


class TestNesting:
    def setup_method(self):
        self.root = make_root([
            Box(id="el-1", name="Outer", children=(
                Box(id="el-2", name="Inner", children=(Text(id="el-3", content="x"),)),
                Input(id="el-4"),
            )),
            Text(id="el-5", content="y"),
        ])

    def test_children_code(self):
        assert generate_children_code(self.root) == "\n".join([
            '<box name="Outer">',
            '  <box name="Inner">',
            '    <text name="Text">x</text>',
            "  </box>",
            '  <input name="Input" />',
            "</box>",
            '<text name="Text">y</text>',
        ])

    def test_root_attributes_never_written(self):
        assert "Root" not in generate_children_code(self.root)

    def test_empty_root(self):
        assert generate_children_code(make_root()) == ""

    def test_explicit_indent_width(self):
        code = generate_code(self.root.children[0], indent_width=4)
        assert code.splitlines()[1] == '    <box name="Inner">'

    def test_starting_indent(self):
        assert generate_code(Input(id="el-1"), indent=2) == '    <input name="Input" />'

    def test_indent_from_config(self, monkeypatch):
        monkeypatch.setenv("TUIMARK_INDENT", "3")
        reset_config()
        code = generate_children_code(self.root)
        assert code.splitlines()[1] == '   <box name="Inner">'

    @pytest.mark.parametrize("kind_cls", [Input, Select, Slider, AsciiFont])
    def test_leaves_always_self_close(self, kind_cls):
        assert generate_code(kind_cls(id="el-1")).endswith(" />")
