"""Tests for doctext.entries -- dotted key paths and key filtering."""

import re

from doctext.entries import enumerate_entries, is_key_included
from doctext.syntax import NodeKind, parse_python
from doctext.walkers import find_node

SOURCE = "\n".join([
    "config({",
    "    'foo': 1,",
    "    'bar': {",
    "        'baz': 2,",
    "        'qux': {'deep': 3},",
    "    },",
    "    **extra,",
    "    4: 'four',",
    "    'list': [{'inner': 1}],",
    "})",
]) + "\n"


def _mapping():
    root, _ = parse_python(SOURCE)
    return find_node(root, lambda node, _: node.kind == NodeKind.MAPPING)


def test_enumerates_nested_keys_in_source_order():
    """Nested string keys get dotted paths; spreads and non-string keys are skipped."""
    entries = enumerate_entries(_mapping())
    assert [(e.key, e.line) for e in entries] == [
        ("foo", 2),
        ("bar", 3),
        ("bar.baz", 4),
        ("bar.qux", 5),
        ("bar.qux.deep", 5),
        ("list", 9),
    ]


def test_blacklisted_parent_keeps_children():
    """Excluding a key does not exclude its children."""
    keys = [e.key for e in enumerate_entries(_mapping(), blacklist=["bar"])]
    assert "bar" not in keys
    assert "bar.baz" in keys


def test_whitelist_regex():
    """A compiled whitelist pattern is matched against the dotted key."""
    keys = [e.key for e in enumerate_entries(_mapping(), whitelist=[re.compile(r"^bar\.")])]
    assert keys == ["bar.baz", "bar.qux", "bar.qux.deep"]


def test_blacklist_takes_precedence():
    """The blacklist wins over the whitelist; an empty whitelist admits all."""
    assert not is_key_included("foo", whitelist=["foo"], blacklist=["foo"])
    assert is_key_included("foo", whitelist=[], blacklist=["bar"])
    assert not is_key_included("foo", whitelist=["bar"], blacklist=[])
    assert is_key_included("server.port", whitelist=[re.compile("port")], blacklist=[])
