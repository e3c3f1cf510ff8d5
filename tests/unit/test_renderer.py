"""Unit tests for the template renderer."""

from collections.abc import Callable
from pathlib import Path

import pytest

from stache.context import mk_generic_context
from stache.models import (
    ABSENT,
    BoolValue,
    Context,
    ContextValue,
    Lambda,
    LambdaM,
    ListValue,
    RenderConfig,
    Variable,
)
from stache.renderers.filters import empty_escape
from stache.templates import (
    LambdaError,
    OutputBuffer,
    TemplateReadError,
    TemplateRenderer,
    render_bytes,
    render_file,
    render_file_to_buffer,
    render_str,
    render_to_buffer,
)

Render = Callable[..., str]


class TestVariables:
    """Tests for variable tags."""

    def test_hello(self, simple_context: Context) -> None:
        """Test substituting variables from a hand-written context."""
        template = b"Hello, {{name}}!\n\nYou have {{unread}} unread messages."

        output = render_bytes(RenderConfig(), template, simple_context)

        assert output == b"Hello, Haskell!\n\nYou have 100 unread messages."

    @pytest.mark.parametrize(
        "template",
        [
            "",
            "plain text",
            "line one\nline two\n",
            "braces { } and } { but no tags",
            "Grüße, 世界",
        ],
    )
    def test_text_without_tags_is_unchanged(self, render: Render, template: str) -> None:
        """Test templates without tags render as themselves."""
        assert render(template) == template

    def test_unterminated_tag_is_literal(self, render: Render) -> None:
        """Test a tag without closing marker passes through."""
        assert render("Hello {{name", {"name": "x"}) == "Hello {{name"

    def test_missing_variable(self, render: Render) -> None:
        """Test missing names render as nothing."""
        assert render("[{{missing}}]") == "[]"

    def test_whitespace_in_tag(self, render: Render) -> None:
        """Test spaces and tabs around names are ignored."""
        assert render("{{ name }}|{{\tname\t}}", {"name": "x"}) == "x|x"

    def test_escaped(self, render: Render) -> None:
        """Test plain variables are HTML-escaped."""
        assert render("{{v}}", {"v": "<b>&</b>"}) == "&lt;b&gt;&amp;&lt;/b&gt;"

    def test_escaping_applies_once(self, render: Render) -> None:
        """Test already escaped values are escaped again."""
        assert render("{{v}}", {"v": "&lt;"}) == "&amp;lt;"

    def test_literal_text_is_not_escaped(self, render: Render) -> None:
        """Test template text is never escaped."""
        assert render("<p>&amp; {{v}}</p>", {"v": "<"}) == "<p>&amp; &lt;</p>"

    def test_triple_brace_unescaped(self, render: Render) -> None:
        """Test {{{name}}} skips escaping."""
        assert render("{{{v}}}", {"v": "<i>"}) == "<i>"

    def test_ampersand_unescaped(self, render: Render) -> None:
        """Test {{&name}} skips escaping."""
        assert render("{{& v }}", {"v": "<i>"}) == "<i>"

    def test_no_escape_config(self, render: Render) -> None:
        """Test the identity escape function."""
        assert render("{{v}}", {"v": "<i>"}, escape=False) == "<i>"

    def test_numbers_and_bools(self, render: Render) -> None:
        """Test scalar values render as text."""
        data = {"i": 3, "f": 2.5, "yes": True, "no": False}

        assert render("{{i}} {{f}} {{yes}} {{no}}", data) == "3 2.5 True False"

    def test_list_value_renders_empty(self, render: Render) -> None:
        """Test a list used as a plain variable renders nothing."""
        assert render("[{{items}}]", {"items": [1, 2]}) == "[]"

    def test_sequence_variable(self) -> None:
        """Test a sequence wrapped in a Variable renders bracketed."""

        def context(name: bytes) -> ContextValue:
            return Variable([1, 2, 3]) if name == b"xs" else ABSENT

        assert render_bytes(RenderConfig(), b"{{xs}}", context) == b"[1,2,3]"

    def test_comment(self, render: Render) -> None:
        """Test comments produce nothing."""
        assert render("a{{! ignore {{ me }}b") == "ab"
        assert render("a{{! note }}b") == "ab"

    def test_unicode(self, render: Render) -> None:
        """Test UTF-8 text and values round-trip."""
        assert render("Grüße {{name}}", {"name": "Zoë"}) == "Grüße Zoë"


class TestSections:
    """Tests for sections and inverted sections."""

    def test_list_iteration(self, render: Render) -> None:
        """Test a section renders once per list item, in order."""
        data = {"list": [{"x": 1}, {"x": 2}]}

        assert render("{{#list}}{{x}}{{/list}}", data) == "12"

    def test_empty_list(self, render: Render) -> None:
        """Test an empty list renders nothing."""
        assert render("a{{#list}}x{{/list}}b", {"list": []}) == "ab"

    def test_item_sees_parent_context(self, render: Render) -> None:
        """Test names missing from the item fall back to the root."""
        data = {"title": "T", "items": [{"n": 1}, {"n": 2}]}

        assert render("{{#items}}{{title}}{{n}},{{/items}}", data) == "T1,T2,"

    def test_scalar_items_self_reference(self, render: Render) -> None:
        """Test {{.}} renders the current scalar item."""
        assert render("{{#xs}}<{{.}}>{{/xs}}", {"xs": ["a", "b"]}) == "<a><b>"

    def test_standalone_lines(self, render: Render) -> None:
        """Test newlines around block sections are consumed."""
        template = "{{#items}}\n- {{name}}\n{{/items}}\nend"
        data = {"items": [{"name": "a"}, {"name": "b"}]}

        assert render(template, data) == "- a\n- b\nend"

    def test_inline_section_keeps_following_newline(self, render: Render) -> None:
        """Test the newline after an inline section is kept."""
        assert render("{{#on}}x{{/on}}\ny", {"on": True}) == "x\ny"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (True, "yes"),
            (False, ""),
            ("text", "yes"),
            ("", ""),
            (5, "yes"),
            (0, ""),
            (0.0, ""),
        ],
    )
    def test_truthiness(self, render: Render, value: object, expected: str) -> None:
        """Test section behaviour for flags and variables."""
        assert render("{{#v}}yes{{/v}}", {"v": value}) == expected

    def test_missing_name(self, render: Render) -> None:
        """Test a missing section renders nothing."""
        assert render("a{{#nope}}x{{/nope}}b") == "ab"

    def test_variable_section_keeps_stack(self, render: Render) -> None:
        """Test a non-empty variable renders the body with the same context."""
        assert render("{{#name}}Hi {{name}}{{/name}}", {"name": "Ann"}) == "Hi Ann"

    def test_nested_sections(self, render: Render) -> None:
        """Test sections nest through different names."""
        data = {"groups": [{"g": "A", "members": [{"m": 1}, {"m": 2}]}, {"g": "B", "members": []}]}
        template = "{{#groups}}{{g}}:{{#members}}{{m}}{{/members}};{{/groups}}"

        assert render(template, data) == "A:12;B:;"

    def test_record_section_pushes_record(self, render: Render) -> None:
        """Test a nested mapping acts as a single-item list."""
        data = {"user": {"name": "Ann"}}

        assert render("{{#user}}{{name}}{{/user}}", data) == "Ann"

    def test_unclosed_section_is_dropped(self, render: Render) -> None:
        """Test an unclosed section tag is consumed and ignored."""
        assert render("a{{#x}}b", {"x": True}) == "ab"

    def test_same_name_nesting_truncates(self, render: Render) -> None:
        """Test the first close tag ends a section even when nested."""
        template = "{{#a}}[{{#a}}x{{/a}}]{{/a}}"

        assert render(template, {"a": True}) == "[x]"

    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            ({"list": []}, "empty"),
            ({"list": [{"x": 1}]}, ""),
            ({}, "empty"),
            ({"list": False}, "empty"),
            ({"list": True}, ""),
            ({"list": ""}, "empty"),
            ({"list": 0}, "empty"),
            ({"list": "x"}, ""),
        ],
    )
    def test_inverted(self, render: Render, data: dict, expected: str) -> None:
        """Test inverted sections render only for falsy probes."""
        assert render("{{^list}}empty{{/list}}", data) == expected

    def test_inverted_lambda_renders_nothing(self) -> None:
        """Test lambdas are not invertible."""

        def context(name: bytes) -> ContextValue:
            return Lambda(lambda body: body) if name == b"f" else ABSENT

        assert render_bytes(RenderConfig(), b"{{^f}}x{{/f}}", context) == b""

    def test_array_path_section(self, render: Render) -> None:
        """Test sections addressed through array paths."""
        data = {"a": [{"name": "x", "on": False}, {"name": "y", "on": True}]}

        assert render("{{#a.1.on}}on{{/a.1.on}}", data) == "on"
        assert render("{{#a.0.on}}on{{/a.0.on}}", data) == ""
        assert render("{{#a.1}}{{name}}{{/a.1}}", data) == "y"

    def test_section_with_custom_delimiters(self, render: Render) -> None:
        """Test section close tags use the delimiters in effect."""
        template = "{{=<% %>=}}<%#items%><%n%>,<%/items%>"

        assert render(template, {"items": [{"n": 1}, {"n": 2}]}) == "1,2,"


class TestArrayPaths:
    """Tests for list.N variable paths."""

    def test_index_field(self, render: Render) -> None:
        """Test {{a.1.name}} resolves into the second item."""
        data = {"a": [{"name": "x"}, {"name": "y"}]}

        assert render("{{a.1.name}}", data) == "y"

    def test_index_self(self, render: Render) -> None:
        """Test {{a.0}} renders a scalar item."""
        assert render("{{a.0}}-{{a.1}}", {"a": ["p", "q"]}) == "p-q"

    def test_out_of_range(self, render: Render) -> None:
        """Test an out-of-range index renders nothing."""
        assert render("[{{a.5.name}}]", {"a": [{"name": "x"}]}) == "[]"

    def test_dotted_record_names(self, render: Render) -> None:
        """Test dotted names walk nested records."""
        data = {"user": {"address": {"city": "Oslo"}}}

        assert render("{{user.address.city}}", data) == "Oslo"


class TestDelimiters:
    """Tests for set-delimiter tags."""

    def test_change(self, render: Render) -> None:
        """Test new delimiters apply to the rest of the template."""
        assert render("{{=<% %>=}}<%x%>", {"x": "hi"}) == "hi"

    def test_old_delimiters_become_text(self, render: Render) -> None:
        """Test old delimiters are literal after a change."""
        assert render("{{=<% %>=}}{{x}}<%x%>", {"x": "hi"}) == "{{x}}hi"

    def test_change_back(self, render: Render) -> None:
        """Test switching delimiters twice."""
        template = "{{=<% %>=}}<%x%><%={{ }}=%>{{x}}"

        assert render(template, {"x": "a"}) == "aa"

    def test_padded_command(self, render: Render) -> None:
        """Test spaces inside the command are trimmed."""
        assert render("{{= | | =}}|x|", {"x": "hi"}) == "hi"

    def test_standalone_trim(self, render: Render) -> None:
        """Test the rest of a delimiter tag line is consumed."""
        assert render("{{=<% %>=}}  \n<%x%>", {"x": "hi"}) == "hi"

    def test_no_trim_without_newline(self, render: Render) -> None:
        """Test spaces are kept when no newline follows."""
        assert render("{{=<% %>=}}  <%x%>", {"x": "hi"}) == "  hi"

    def test_malformed_is_noop(self, render: Render) -> None:
        """Test a malformed command keeps the old delimiters."""
        assert render("{{=<%=}}{{x}}", {"x": "hi"}) == "hi"
        assert render("{{=<% %>}}{{x}}", {"x": "hi"}) == "hi"

    def test_scoped_to_section_body(self, render: Render) -> None:
        """Test a change inside a section body does not leak out."""
        template = "{{#on}}{{=<% %>=}}<%x%>{{/on}}{{x}}"

        assert render(template, {"on": True, "x": "v"}) == "vv"


class TestLambdas:
    """Tests for lambda sections."""

    def test_receives_raw_body(self, render: Render) -> None:
        """Test the lambda gets the unprocessed body."""
        seen: list[bytes] = []

        def wrap(body: bytes) -> bytes:
            seen.append(body)
            return b"<b>" + body + b"</b>"

        output = render("{{#wrap}}Hi {{name}}{{/wrap}}", {"wrap": wrap, "name": "Ann"})

        assert seen == [b"Hi {{name}}"]
        assert output == "<b>Hi {{name}}</b>"

    def test_result_rendered_as_value(self) -> None:
        """Test non-bytes results go through value rendering."""

        def context(name: bytes) -> ContextValue:
            return Lambda(len) if name == b"count" else ABSENT

        assert render_bytes(RenderConfig(), b"{{#count}}abcd{{/count}}", context) == b"4"

    def test_effectful_lambda_called_in_order(self) -> None:
        """Test LambdaM runs once per occurrence, left to right."""
        calls: list[bytes] = []

        def log(body: bytes) -> bytes:
            calls.append(body)
            return body.upper()

        def context(name: bytes) -> ContextValue:
            return LambdaM(log) if name == b"log" else ABSENT

        template = b"{{#log}}one{{/log}}-{{#log}}two{{/log}}"
        output = render_bytes(RenderConfig(), template, context)

        assert output == b"ONE-TWO"
        assert calls == [b"one", b"two"]

    def test_lambda_error_propagates(self) -> None:
        """Test exceptions raised by a lambda reach the caller."""

        def boom(body: bytes) -> bytes:
            raise RuntimeError("disk on fire")

        def context(name: bytes) -> ContextValue:
            return LambdaM(boom) if name == b"boom" else ABSENT

        with pytest.raises(LambdaError, match="disk on fire") as exc_info:
            render_bytes(RenderConfig(), b"{{#boom}}x{{/boom}}", context)

        assert exc_info.value.section == b"boom"
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_lambda_output_not_escaped(self, render: Render) -> None:
        """Test lambda output is appended as-is."""
        assert render("{{#f}}x{{/f}}", {"f": lambda body: "<&>"}) == "<&>"


class TestPartials:
    """Tests for partial tags."""

    def test_partial_rendered_with_context(self, render: Render) -> None:
        """Test partial content is rendered as template text."""
        output = render("[{{> user}}]", {"name": "Ann"}, partials={"user": "<{{name}}>"})

        assert output == "[<Ann>]"

    def test_missing_partial(self, render: Render) -> None:
        """Test a missing partial contributes nothing."""
        assert render("a{{> nope}}b") == "ab"

    def test_partial_in_list(self, render: Render) -> None:
        """Test partials see the current item context."""
        data = {"items": [{"n": 1}, {"n": 2}]}

        assert render("{{#items}}{{>item}}{{/items}}", data, partials={"item": "({{n}})"}) == (
            "(1)(2)"
        )

    def test_standalone_trim(self, render: Render) -> None:
        """Test the newline after a partial tag is consumed."""
        output = render("{{> head}}\nbody", {}, partials={"head": "HEAD\n"})

        assert output == "HEAD\nbody"

    def test_partial_uses_current_delimiters(self, render: Render) -> None:
        """Test partial content is scanned with the delimiters in effect."""
        output = render("{{=<% %>=}}<%> p%>", {"x": "v"}, partials={"p": "<%x%>{{x}}"})

        assert output == "v{{x}}"

    def test_file_partials(self, tmp_path: Path) -> None:
        """Test partials read from the configured directory and extension."""
        (tmp_path / "user.mustache").write_text("<b>{{name}}</b>", encoding="utf-8")
        config = RenderConfig(template_dir=tmp_path, template_ext=".mustache")
        context = mk_generic_context({"name": "Ann"})

        output = render_bytes(config, b"{{> user}}\nrest {{> missing}}", context)

        assert output == b"<b>Ann</b>rest "


class TestEntryPoints:
    """Tests for the module-level render functions."""

    def test_render_str(self) -> None:
        """Test rendering text with the default config."""
        context = mk_generic_context({"name": "<Ann>"})

        assert render_str("Hi {{name}}", context) == "Hi &lt;Ann&gt;"

    def test_render_str_with_config(self) -> None:
        """Test rendering text with an explicit config."""
        context = mk_generic_context({"name": "<Ann>"})

        assert render_str("Hi {{name}}", context, RenderConfig(escape=empty_escape)) == "Hi <Ann>"

    def test_render_to_buffer(self) -> None:
        """Test the buffer variant returns an OutputBuffer."""
        buffer = render_to_buffer(RenderConfig(), b"a{{x}}c", mk_generic_context({"x": "b"}))

        assert isinstance(buffer, OutputBuffer)
        assert buffer.getvalue() == b"abc"

    def test_render_file(self, tmp_path: Path) -> None:
        """Test rendering a template file."""
        path = tmp_path / "t.mustache"
        path.write_text("Hello, {{name}}!", encoding="utf-8")
        context = mk_generic_context({"name": "file"})

        assert render_file(RenderConfig(), path, context) == b"Hello, file!"
        assert render_file_to_buffer(RenderConfig(), str(path), context).getvalue() == (
            b"Hello, file!"
        )

    def test_render_file_missing(self, tmp_path: Path) -> None:
        """Test a missing template file raises TemplateReadError."""
        with pytest.raises(TemplateReadError) as exc_info:
            render_file(RenderConfig(), tmp_path / "nope.mustache", mk_generic_context({}))

        assert exc_info.value.path == tmp_path / "nope.mustache"
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_renderer_reuse(self) -> None:
        """Test a renderer can render several templates independently."""
        renderer = TemplateRenderer()
        context = mk_generic_context({"x": 1})

        assert renderer.render(b"{{=<% %>=}}<%x%>", context) == b"1"
        assert renderer.render(b"{{x}}", context) == b"1"

    def test_custom_context_values(self) -> None:
        """Test hand-built ListValue and BoolValue contexts."""

        def item(n: int) -> Context:
            return lambda name: Variable(n) if name == b"n" else ABSENT

        def context(name: bytes) -> ContextValue:
            if name == b"items":
                return ListValue((item(1), item(2)))
            if name == b"flag":
                return BoolValue(True)
            return ABSENT

        template = b"{{#flag}}{{#items}}{{n}}{{/items}}{{/flag}}"

        assert render_bytes(RenderConfig(), template, context) == b"12"


class SliceCountingBytes(bytes):
    """Bytes that record how many bytes slicing has copied out of them."""

    copied = 0

    def __getitem__(self, key):  # type: ignore[override]
        result = super().__getitem__(key)
        if isinstance(key, slice):
            self.copied += len(result)
        return result


class TestScanCost:
    """Tests that rendering copies each template byte a bounded number of times."""

    @pytest.mark.parametrize(
        ("unit", "data", "expected"),
        [
            (b"{{x}}", {"x": "v"}, b"v"),
            (b"ab {{x}} cd", {"x": "v"}, b"ab v cd"),
            (b"{{#s}}{{x}}{{/s}}", {"s": True, "x": "v"}, b"v"),
            (b"{{! note }}", {}, b""),
        ],
    )
    def test_many_tags_copy_linearly(self, unit: bytes, data: dict, expected: bytes) -> None:
        """Test slicing stays proportional to the template, not tags times size."""
        count = 2000
        template = SliceCountingBytes(unit * count)

        output = TemplateRenderer().render(template, mk_generic_context(data))

        assert output == expected * count
        assert template.copied <= 2 * len(template)
