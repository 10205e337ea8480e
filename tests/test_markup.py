"""Markup template adapter tests."""

import logging
from textwrap import dedent

import pytest

from icuflow.diagnostics import ComputedLabelNotAllowedError, SourceLocation
from icuflow.extraction import extract_source, parse_markup
from icuflow.extraction.markup import attribute_value
from icuflow.extraction.nodes import (
    Argument,
    Expression,
    Literal,
    Markup,
    Text,
    VariableRef,
)
from icuflow.extraction.template import text_content


def ids(source: str) -> list[str]:
    result = extract_source(dedent(source), "page.html")
    assert result.errors == ()
    return [message.id for message in result.messages]


class TestTextContent:
    """{expression} references inside text."""

    def test_plain_text(self) -> None:
        assert text_content("Hello") == (Text("Hello"),)

    def test_variable_and_expression(self) -> None:
        assert text_content("{name} owes {order.total}") == (
            Argument(VariableRef("name")),
            Text(" owes "),
            Argument(Expression("order.total")),
        )

    def test_empty(self) -> None:
        assert text_content("") == ()


class TestAttributeValue:
    """Parameter attribute shapes."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("{count}", VariableRef("count")),
            (" { count } ", VariableRef("count")),
            ("{items|length}", Expression("items|length")),
            ("2", Literal(2)),
            ("-1", Literal(-1)),
            ("short", Literal("short")),
            (None, Literal("")),
        ],
    )
    def test_shapes(self, raw: str | None, expected: object) -> None:
        assert attribute_value(raw) == expected


class TestTransElements:
    """<trans> messages."""

    def test_full_message(self) -> None:
        source = """
        <trans id="inbox.summary">
          Hello <strong>{name}</strong>, you have
          <plural value="{count}" _0="no messages" one="# message" other="# messages"/>
          since <dateformat value="{since}" format="short"/>.
        </trans>
        """
        result = extract_source(dedent(source), "inbox.html")

        (message,) = result.messages
        assert message.id == "inbox.summary"
        assert message.defaults == (
            "Hello <0>{name}</0>, you have "
            "{count, plural, =0 {no messages} one {# message} other {# messages}} "
            "since {since,date,short}."
        )
        assert [node.tag for node in message.descriptor.inline_nodes] == ["strong"]

    def test_text_outside_trans_ignored(self) -> None:
        assert ids("<h1>Title</h1><p><trans>Body</trans></p>") == ["Body"]

    def test_expression_placeholder(self) -> None:
        assert ids("<trans>Total {order.total}</trans>") == ["Total {0}"]

    def test_void_element(self) -> None:
        assert ids("<trans>Line<br>break</trans>") == ["Line<0/>break"]

    def test_inline_attributes_kept_on_node(self) -> None:
        (message,) = parse_markup('<trans>See <a href="/docs">docs</a></trans>', "p.html")

        link = message.content[1]
        assert isinstance(link, Markup)
        assert link.attributes == (("href", "/docs"),)
        assert link.children == (Text("docs"),)

    def test_unclosed_inline_element_ends_with_parent(self) -> None:
        assert ids("<trans>Read <b>this</trans>") == ["Read <0>this</0>"]

    def test_stray_end_tag_ignored(self) -> None:
        assert ids("<trans>Hi</b> there</trans>") == ["Hi there"]

    def test_character_references_decoded(self) -> None:
        assert ids("<trans>Fish &amp; chips</trans>") == ["Fish & chips"]

    def test_location(self) -> None:
        (message,) = parse_markup("<div>\n  <p><trans>Hi</trans></p>\n</div>", "p.html")

        assert message.location == SourceLocation("p.html", 2, 6)

    def test_unclosed_message_dropped(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="icuflow.extraction.markup"):
            messages = parse_markup("<trans>Never closed", "p.html")

        assert messages == []
        assert "never closed" in caplog.text


class TestChoiceElements:
    """plural / select / selectordinal elements."""

    def test_top_level_plural(self) -> None:
        source = '<p><plural value="{n}" one="# item" other="# items"></plural></p>'
        assert ids(source) == ["{n, plural, one {# item} other {# items}}"]

    def test_self_closing_top_level(self) -> None:
        source = '<selectordinal value="{place}" offset="1" one="#st" other="#th"/>'
        assert ids(source) == ["{place, selectordinal, offset:1 one {#st} other {#th}}"]

    def test_select_case_with_variable(self) -> None:
        source = '<select value="{gender}" female="{name} replied" other="They replied"/>'
        assert ids(source) == [
            "{gender, select, female {{name} replied} other {They replied}}"
        ]

    def test_form_select_ignored(self) -> None:
        assert ids('<select name="size"><option>Small</option></select>') == []

    def test_explicit_id_on_choice(self) -> None:
        result = extract_source(
            '<plural id="cart.items" value="{n}" other="# items"/>', "cart.html"
        )

        (message,) = result.messages
        assert message.id == "cart.items"
        assert message.defaults == "{n, plural, other {# items}}"

    def test_computed_label(self) -> None:
        result = extract_source(
            '<trans><plural value="{n}" {label}="x" other="y"/></trans>', "p.html"
        )

        assert result.messages == ()
        assert isinstance(result.errors[0], ComputedLabelNotAllowedError)


class TestFormatElements:
    """dateformat / numberformat elements."""

    def test_number_without_style(self) -> None:
        assert ids('<trans>Total: <numberformat value="{total}"/></trans>') == [
            "Total: {total,number}"
        ]

    def test_inline_json_style(self) -> None:
        source = (
            "<trans><numberformat value=\"{price}\" "
            "format='{\"minimum_fraction_digits\": 2}'/></trans>"
        )
        result = extract_source(source, "p.html")

        (message,) = result.messages
        assert message.id == "{price,number,number0}"
        assert message.descriptor.custom_formats["number0"].style == {
            "minimum_fraction_digits": 2
        }

    def test_variable_style(self) -> None:
        source = '<trans><dateformat value="{when}" format="{fmt}"/></trans>'
        result = extract_source(source, "p.html")

        (message,) = result.messages
        assert message.id == "{when,date,fmt}"
        assert "fmt" in message.descriptor.custom_formats
