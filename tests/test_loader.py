"""Tests for catalog loading."""

import pytest

from typedi18n.classes import ErrorKind
from typedi18n.errors import DecodeError
from typedi18n.loader import decode_document, load_catalog, load_source

SAMPLE = """
root_message = "Hello world"
greet = "Hi {name}"

[menu]
family = "{count} {{pet|pets}} named {name}"
message = "{count} new message{{s}} from {name}"

[specials]
escaped = "100% sure"
"""


def messages(result):
    return [error.message for error in result.errors]


class TestDecode:
    def test_decode(self):
        assert decode_document('a = "b"') == {"a": "b"}

    def test_invalid_toml(self):
        with pytest.raises(DecodeError, match="failed to decode TOML"):
            decode_document("invalid toml [[[")


class TestLoadSource:
    def test_sample(self):
        result = load_source("en", SAMPLE)
        assert result.errors == []
        catalog = result.catalog
        assert catalog.locale == "en"
        assert set(catalog.root) == {"root_message", "greet"}
        assert set(catalog.sections) == {"menu", "specials"}
        assert catalog.sections["menu"]["family"].signature() == "Family(count: int, name: str)"
        assert catalog.sections["specials"]["escaped"].singular_template == "100%% sure"

    def test_decode_failure_is_fatal_for_locale(self):
        result = load_source("fr", "invalid toml [[[")
        assert result.catalog is None
        assert len(result.errors) == 1
        assert result.errors[0].kind is ErrorKind.DECODE
        assert result.errors[0].locale == "fr"

    def test_catalog_is_read_only(self):
        catalog = load_source("en", SAMPLE).catalog
        with pytest.raises(TypeError):
            catalog.root["new"] = catalog.root["greet"]
        with pytest.raises(TypeError):
            catalog.sections["menu"]["new"] = catalog.root["greet"]


@pytest.mark.parametrize(
    "toml, kind, contains",
    [
        ("age = 123", ErrorKind.TYPE_MISMATCH, "unexpected type for key age: int"),
        ("flag = true", ErrorKind.TYPE_MISMATCH, "unexpected type for key flag: bool"),
        (
            '[foo.bar]\nkey = "value"',
            ErrorKind.TYPE_MISMATCH,
            "expected string under foo > bar, but found nested structure",
        ),
        ("[section]\nkey = 123", ErrorKind.TYPE_MISMATCH, "expected string under section > key, but found '123'"),
        ('set_language = "test"', ErrorKind.NAME_CONFLICT, "conflicts with 'SetLanguage'"),
        ('new_translator = "test"', ErrorKind.NAME_CONFLICT, "conflicts with 'NewTranslator'"),
        ('[set_language]\nkey = "test"', ErrorKind.NAME_CONFLICT, "conflicts with 'SetLanguage'"),
        ('greeting = "Hello {name"', ErrorKind.SYNTAX, "syntax error"),
        ('items = "{{count item"', ErrorKind.SYNTAX, "syntax error"),
        ('hello_world = "a"\nhelloWorld = "b"', ErrorKind.NAME_CONFLICT, "both normalize to 'HelloWorld'"),
        ('menu_x = "a"\n[MenuX]\nk = "b"', ErrorKind.NAME_CONFLICT, "both normalize to 'MenuX'"),
        ('[s]\nmy_key = "a"\nmyKey = "b"', ErrorKind.NAME_CONFLICT, "in [s] both normalize to 'MyKey'"),
        ('a_bc = "one"\nabc = "two"', ErrorKind.NAME_CONFLICT, "'abc' and 'a_bc' both normalize to 'abc'"),
        ('[a_bc]\nx = "1"\n[abc]\ny = "2"', ErrorKind.NAME_CONFLICT, "both normalize to 'abc'"),
        ('greet = "{value} and {}"', ErrorKind.NAME_CONFLICT, "both become argument 'value'"),
    ],
)
def test_entry_errors(toml, kind, contains):
    result = load_source("en", toml)
    assert result.catalog is not None
    assert len(result.errors) == 1
    error = result.errors[0]
    assert error.kind is kind
    assert contains in error.message


def test_errors_are_collected_per_entry():
    result = load_source(
        "sv",
        'ok = "fine"\nbroken = "Hello {name"\nage = 1\nset_language = "x"\n'
        '[menu]\ngood = "{count} x"\nbad = "{{y"\n',
    )
    assert [error.kind for error in result.errors] == [
        ErrorKind.SYNTAX,
        ErrorKind.TYPE_MISMATCH,
        ErrorKind.NAME_CONFLICT,
        ErrorKind.SYNTAX,
    ]
    assert all(error.locale == "sv" for error in result.errors)
    assert result.errors[0].key == "broken"
    assert result.errors[-1].section == "menu"
    assert result.errors[-1].key == "bad"
    # Siblings of broken entries are still compiled
    assert set(result.catalog.root) == {"ok"}
    assert set(result.catalog.sections["menu"]) == {"good"}


def test_load_catalog_from_mapping():
    result = load_catalog("en", {"greet": "Hi {name}", "menu": {"title": "Menu"}})
    assert result.errors == []
    assert result.catalog.root["greet"].callable_name == "Greet"
    assert result.catalog.sections["menu"]["title"].callable_name == "Title"


def test_empty_document():
    result = load_catalog("en", {})
    assert result.errors == []
    assert dict(result.catalog.root) == {}
    assert dict(result.catalog.sections) == {}
