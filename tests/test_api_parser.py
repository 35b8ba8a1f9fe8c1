#!/usr/bin/env python3
"""
Test script for the Bot API schema builder.
Validates the heading/paragraph/table grouping for types and methods.
"""

import asyncio
import sys

import pytest

from html_builders import PARAMETER_HEADER, h4, p, page, sample_page, table, ul
from utils.api_models import Field, Parameter, Type
from utils.api_parser import (
    MethodScanner,
    ScanState,
    TypeScanner,
    parse_api,
    parse_methods,
    parse_types,
)
from utils.errors import AmbiguousShape, MissingColumn
from utils.html_blocks import classify_blocks


def _blocks(*elements):
    return classify_blocks(page(*elements))


def test_type_with_field_table():
    blocks = _blocks(
        h4("User"),
        p("Represents a Telegram user."),
        table([("id", "Integer", "Unique identifier")]),
    )
    types = parse_types(blocks)

    assert types == {
        Type(
            name="User",
            description="Represents a Telegram user.",
            fields=(Field(name="id", type="int64", optional=False, description="Unique identifier"),),
        )
    }


def test_lowercase_heading_is_never_a_type():
    blocks = _blocks(
        h4("id"), p("Looks like a declaration."), table([("id", "Integer", "Identifier")]),
        h4("other"), p("Field-less."), h4("next"),
        h4("list"), ul("A", "B"),
    )

    assert parse_types(blocks) == frozenset()


def test_optional_prefix_marks_field_optional():
    blocks = _blocks(h4("Settings"), table([
        ("enabled", "Boolean", "<em>Optional</em>. Pass <em>True</em> to enable"),
        ("level", "Integer", "Level, Optional in practice"),
    ]))
    settings = next(iter(parse_types(blocks)))

    assert settings.get_field("enabled").optional is True
    assert settings.get_field("level").optional is False


def test_missing_type_column_raises():
    blocks = _blocks(h4("User"), p("A user."), table([("id", "Unique identifier")], header=("Field", "Description")))

    with pytest.raises(MissingColumn) as exc_info:
        parse_types(blocks)
    assert exc_info.value.declaration == "User"
    assert exc_info.value.column == "Type"


def test_ragged_row_raises_missing_column():
    blocks = _blocks(h4("User"), table([("id", "Integer")]))

    with pytest.raises(MissingColumn) as exc_info:
        parse_types(blocks)
    assert exc_info.value.column == "Description"


def test_heading_paragraph_heading_yields_fieldless_type():
    blocks = _blocks(h4("CallbackGame"), p("A placeholder."), h4("Next"))
    types = parse_types(blocks, flush_trailing=False)

    assert types == {Type(name="CallbackGame", description="A placeholder.")}


def test_heading_without_paragraph_is_dropped():
    blocks = _blocks(h4("Orphan"), h4("Other"), p("Described."), h4("Last"))

    assert [t.name for t in parse_types(blocks)] == ["Other"]


def test_last_paragraph_wins():
    blocks = _blocks(h4("InputFile"), p("First."), p("Second."), h4("Next"))
    input_file = next(iter(parse_types(blocks, flush_trailing=False)))

    assert input_file.description == "Second."


def test_trailing_fieldless_type_flush():
    blocks = _blocks(h4("User"), table([("id", "Integer", "Identifier")]), h4("InputFile"), p("A file."))

    assert {t.name for t in parse_types(blocks)} == {"User", "InputFile"}
    assert {t.name for t in parse_types(blocks, flush_trailing=False)} == {"User"}


def test_paragraph_after_table_yields_second_fieldless_type():
    blocks = _blocks(
        h4("User"), p("A user."), table([("id", "Integer", "Identifier")]),
        p("Note."),
        h4("Chat"), p("A chat."), table([("id", "Integer", "Identifier")]),
    )
    types = TypeScanner().scan(blocks)

    assert [(t.name, t.description, len(t.fields)) for t in types] == [
        ("User", "A user.", 1),
        ("User", "Note.", 0),
        ("Chat", "A chat.", 1),
    ]


def test_every_table_under_heading_yields_a_type():
    blocks = _blocks(
        h4("User"),
        table([("id", "Integer", "Identifier")]),
        table([("b", "Boolean", "Flag")]),
    )
    types = TypeScanner().scan(blocks)

    assert [(t.name, [f.name for f in t.fields]) for t in types] == [
        ("User", ["id"]),
        ("User", ["b"]),
    ]
    assert len(parse_types(blocks)) == 2


def test_item_list_type():
    blocks = _blocks(h4("ChatMember"), p("One of:"), ul("ChatMemberOwner", "ChatMemberMember", "ChatMemberOwner"))
    chat_member = next(iter(parse_types(blocks)))

    assert chat_member.fields == (
        Field(name="ChatMemberMember", type="ChatMemberMember"),
        Field(name="ChatMemberOwner", type="ChatMemberOwner"),
    )


def test_blank_item_list_is_not_an_empty_enum():
    assert parse_types(_blocks(h4("Empty"), ul(" ", ""))) == frozenset()


def test_table_and_list_is_ambiguous():
    blocks = _blocks(h4("ChatMember"), table([("id", "Integer", "Identifier")]), ul("A"))

    with pytest.raises(AmbiguousShape) as exc_info:
        parse_types(blocks)
    assert exc_info.value.declaration == "ChatMember"

    with pytest.raises(AmbiguousShape):
        parse_methods(blocks)


def test_fields_keyed_by_name():
    blocks = _blocks(h4("User"), table([
        ("username", "String", "First description"),
        ("id", "Integer", "Identifier"),
        ("username", "String", "Second description"),
    ]))
    user = next(iter(parse_types(blocks)))

    assert [f.name for f in user.fields] == ["id", "username"]
    assert user.get_field("username").description == "First description"


def test_method_parameters():
    blocks = _blocks(
        h4("sendMessage"),
        p("Use this method to send text messages."),
        table([
            ("chat_id", "Integer or String", "Yes", "Target chat"),
            ("entities", "Array of MessageEntity", "Optional", "Special entities"),
        ], header=PARAMETER_HEADER),
    )
    methods = parse_methods(blocks)
    send_message = next(iter(methods))

    assert send_message.name == "sendMessage"
    assert send_message.parameters == (
        Parameter(name="chat_id", type="string", required=True, description="Target chat"),
        Parameter(name="entities", type="array<MessageEntity>", required=False, description="Special entities"),
    )
    assert parse_types(blocks) == frozenset()


def test_method_without_parameters():
    blocks = _blocks(h4("getMe"), p("Requires no parameters."), h4("logOut"), p("Log out."))
    methods = parse_methods(blocks)

    assert sorted(m.name for m in methods) == ["getMe", "logOut"]
    assert all(m.parameters == () for m in methods)


def test_method_missing_required_column():
    blocks = _blocks(h4("sendMessage"), table([("chat_id", "Integer", "Target")], header=("Parameter", "Type", "Description")))

    with pytest.raises(MissingColumn) as exc_info:
        parse_methods(blocks)
    assert exc_info.value.column == "Required"


def test_scanner_states():
    scanner = TypeScanner()
    assert scanner.state is ScanState.IDLE

    blocks = _blocks(h4("User"), p("A user."), table([("id", "Integer", "Identifier")]))
    scanner.feed(blocks[0])
    assert scanner.state is ScanState.AWAITING_SHAPE
    scanner.feed(blocks[1])
    assert scanner.pending_description == "A user."
    scanner.feed(blocks[2])
    assert scanner.state is ScanState.AWAITING_SHAPE
    assert [t.name for t in scanner.declarations] == ["User"]

    assert MethodScanner().scan(blocks) == []


def test_parse_api_joins_both_passes():
    schema = asyncio.run(parse_api(classify_blocks(sample_page())))

    assert schema.type_names() == ["CallbackGame", "ChatMember", "ChatPhoto", "InputFile", "User"]
    assert schema.method_names() == ["getMe", "sendMessage"]

    user = schema.get_type("User")
    assert user.get_field("id") == Field(name="id", type="int64", optional=False,
                                         description="Unique identifier for this user or bot.")
    assert user.get_field("is_bot").type == "bool"
    assert user.get_field("last_name").optional is True

    sizes = schema.get_type("ChatPhoto").get_field("sizes")
    assert sizes.type == "array<array<int64>>"

    send_message = schema.get_method("sendMessage")
    assert [p.name for p in send_message.required_parameters] == ["chat_id", "text"]


def test_parse_api_propagates_errors():
    blocks = _blocks(h4("User"), table([("id",)], header=("Field",)))

    with pytest.raises(MissingColumn):
        asyncio.run(parse_api(blocks))


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
