"""Tests for doctext.resolver -- @copy resolution and @property expansion."""

import pytest

from doctext.entities import default_entities
from doctext.errors import ReferencedKeyNotFound
from doctext.parser import DoctextParser
from doctext.resolver import resolve_copies, resolve_properties
from doctext.types import CommentBlock, Document, Link


def _parser() -> DoctextParser:
    return DoctextParser(default_entities())


def _doc(summary: str = "", lineno: int = 1, **entities) -> Document:
    return Document(lineno=lineno, summary=summary, body=summary, entities=dict(entities))


# --- resolve_copies ---

def test_copy_takes_text_and_entities():
    """The copier takes the source's summary, body and entities."""
    foo = _doc("Foo.", links=[Link("https://example.com", "https://example.com")])
    bar = _doc(copy="foo")
    matched = {"bar": bar, "foo": foo}
    resolve_copies(matched)

    assert bar.summary == "Foo."
    assert bar.body == "Foo."
    assert bar.entities == foo.entities
    assert foo.summary == "Foo."


def test_copied_entities_are_independent():
    """Copied entities are deep copies."""
    foo = _doc("Foo.", links=[Link("https://example.com", "Example")])
    bar = _doc(copy="foo")
    resolve_copies({"bar": bar, "foo": foo})

    assert bar.entities["links"] is not foo.entities["links"]
    foo.entities["links"][0].caption = "Changed"
    assert bar.entities["links"][0].caption == "Example"


def test_copy_of_missing_key():
    """A missing source key raises with the copier's line."""
    bar = _doc(lineno=9, copy="foo")
    with pytest.raises(ReferencedKeyNotFound) as exc:
        resolve_copies({"bar": bar})
    assert exc.value.key == "foo"
    assert exc.value.lineno == 9
    assert exc.value.document is bar


def test_copy_chain_is_not_followed():
    """a copies b before b has copied c, so a gets b's unresolved state."""
    a, b, c = _doc(copy="b"), _doc(copy="c"), _doc("C.")
    resolve_copies({"a": a, "b": b, "c": c})
    assert b.summary == "C."
    assert a.summary == ""
    assert a.entities == {"copy": "c"}


def test_copy_chain_in_resolution_order():
    """When b is visited first, a sees the already resolved text."""
    a, b, c = _doc(copy="b"), _doc(copy="c"), _doc("C.")
    resolve_copies({"b": b, "a": a, "c": c})
    assert a.summary == "C."


# --- resolve_properties ---

def test_property_of_matched_document():
    """A property of a matched document is keyed under its parent."""
    block = CommentBlock(lineno=3, lines=["Foobar.", "", "Foobar also exists."])
    matched = {"foo": _doc("Foo.", properties={"bar": block})}
    resolve_properties(matched, [], _parser())

    assert list(matched) == ["foo", "foo.bar"]
    assert matched["foo.bar"].summary == "Foobar."
    assert matched["foo.bar"].body == "Foobar. Foobar also exists."
    assert matched["foo.bar"].lineno == 3


def test_property_of_unmatched_document_uses_bare_key():
    """A property of an unmatched document keeps its own key."""
    block = CommentBlock(lineno=1, lines=["Foobarbaz."])
    matched: dict[str, Document] = {}
    resolve_properties(matched, [_doc(properties={"foo.bar.baz": block})], _parser())
    assert list(matched) == ["foo.bar.baz"]
    assert matched["foo.bar.baz"].summary == "Foobarbaz."


def test_property_expansion_is_single_pass():
    """Properties declared inside an inserted property document stay unexpanded."""
    block = CommentBlock(lineno=1, lines=["Outer.", "@property inner", "  Inner."])
    matched = {"foo": _doc(properties={"outer": block})}
    resolve_properties(matched, [], _parser())

    assert set(matched) == {"foo", "foo.outer"}
    assert "inner" in matched["foo.outer"].entities["properties"]
