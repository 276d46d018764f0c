"""Tests for doctext.comments -- run merging, marker stripping, normalization."""

import ast
from pathlib import Path

import doctext
from doctext.comments import extract_blocks, merge_tokens, normalize_lines
from doctext.types import CommentKind, CommentToken


def _line(lineno: int, text: str) -> CommentToken:
    return CommentToken(start_line=lineno, end_line=lineno, kind=CommentKind.LINE, text=text)


def _block(start: int, end: int, text: str) -> CommentToken:
    return CommentToken(start_line=start, end_line=end, kind=CommentKind.BLOCK, text=text)


def test_adjacent_tokens_merge_into_one_block():
    """Tokens on consecutive lines form one block; a gap starts a new one."""
    tokens = [_line(3, ": Foo."), _line(4, ": Bar."), _line(6, ": Baz.")]
    blocks = extract_blocks(tokens)
    assert [b.lineno for b in blocks] == [3, 6]
    assert blocks[0].lines == ["Foo.", "Bar."]
    assert blocks[1].lines == ["Baz."]
    assert blocks[0].tokens == tokens[:2]


def test_double_hash_marker():
    """``##`` comments are doctext; blank marker lines are kept inside."""
    blocks = extract_blocks([_line(1, "# Foo."), _line(2, "#"), _line(3, "# Body.")])
    assert len(blocks) == 1
    assert blocks[0].lines == ["Foo.", "", "Body."]


def test_triple_hash_marker():
    """``###`` comments are doctext too."""
    blocks = extract_blocks([_line(1, "## Foo.")])
    assert blocks[0].lines == ["Foo."]


def test_plain_comments_are_not_doctext():
    """A run that does not open with the marker is dropped entirely."""
    assert extract_blocks([_line(1, " just a comment"), _line(2, ": not first")]) == []


def test_separator_marks_block_separate():
    """A trailing ``---`` line is dropped and marks the block separate."""
    tokens = [_line(1, ": Overall."), _line(2, ":"), _line(3, ": ---")]
    block = merge_tokens(tokens)
    assert block is not None
    assert block.separate is True
    assert block.lines == ["Overall."]


def test_separator_only_counts_as_last_line():
    """A ``---`` line anywhere but last is ordinary text."""
    block = merge_tokens([_line(1, ": ---"), _line(2, ": Foo.")])
    assert block is not None
    assert block.separate is False
    assert block.lines == ["---", "Foo."]


def test_relative_indent_survives_and_interior_spaces_collapse():
    """Common indent is stripped; interior whitespace runs collapse."""
    block = merge_tokens([_line(1, ": @link https://x.com"), _line(2, ":   Caption    text  ")])
    assert block is not None
    assert block.lines == ["@link https://x.com", "  Caption text"]


def test_custom_marker_delimits_text():
    """With a custom marker, text runs between two markers or to the end."""
    marker = '"""'
    assert extract_blocks([_line(1, ' """Will work."""')], marker)[0].lines == ["Will work."]
    assert extract_blocks([_line(1, ' """Will work too.')], marker)[0].lines == ["Will work too."]
    assert extract_blocks([_line(1, ": Will not work.")], marker) == []


def test_block_comment_with_default_marker():
    """Block tokens drop the opening asterisk and one asterisk per line."""
    block = merge_tokens([_block(1, 4, "*\n * Baz.\n * Baz.\n ")])
    assert block is not None
    assert block.lines == ["Baz.", "Baz."]
    assert block.lineno == 1


def test_single_line_block_comment():
    """A one-line block token keeps its text after the asterisk."""
    block = merge_tokens([_block(5, 5, "* Foo. ")])
    assert block is not None
    assert block.lines == ["Foo."]


def test_block_comment_without_marker_is_dropped():
    """A block token without a leading asterisk is not doctext."""
    assert merge_tokens([_block(1, 1, " regular block ")]) is None


def test_multi_line_block_token_merges_with_next_line():
    """Adjacency is measured from the end line of the previous token."""
    blocks = extract_blocks([_block(1, 3, "* One.\n * Two.\n "), _block(4, 4, "* Three. ")])
    assert len(blocks) == 1
    assert blocks[0].lines == ["One.", "Two.", "", "Three."]


def test_normalize_lines_trims_blank_edges():
    """Blank lines at both edges are removed."""
    assert normalize_lines(["", "   ", "  Foo", "    Bar", "", ""]) == ["Foo", "  Bar"]


def test_normalize_lines_all_blank():
    """Only blank lines normalize to nothing."""
    assert normalize_lines(["", "  "]) == []


def test_documented_custom_marker_example():
    """The custom-marker example in the module docstring holds."""
    assert '``marker="!!"``' in doctext.comments.__doc__
    assert extract_blocks([_line(1, " !! Port. !!")], "!!")[0].lines == ["Port."]


def test_package_sources_parse():
    """Every module in the package is valid Python source."""
    package_dir = Path(doctext.__file__).parent
    for path in sorted(package_dir.glob("*.py")):
        ast.parse(path.read_text(), filename=str(path))
