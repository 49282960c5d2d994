"""Format/sort engine"""

import re
from typing import Callable

import pytest

from toml_maid import Config, Maid, TomlFormatter, normalize_quotes, read_document

Format = Callable[..., str]

CARGO = """\
# Package metadata
[package]
version = "0.1.0"
name = 'demo'
authors = ['b', "a"]

[dependencies]
serde = { version = "1", features = ["derive"] }
anyhow = "1"  # errors

# local crates
zeta = { path = "../zeta" }
alpha = { path = "../alpha" }

[[bin]]
name = "tool"
path = 'src/main.rs'

# trailing note
"""


class TestKeyOrder:
    def test_configured_keys_first(self, fmt: Format) -> None:
        assert fmt("a = 1\nb = 2\nc = 3\n", keys=["b", "a"]) == "b = 2\na = 1\nc = 3\n"

    def test_lexicographic_without_config(self, fmt: Format) -> None:
        assert fmt("c = 1\nb = 2\na = 3\n") == "a = 3\nb = 2\nc = 1\n"

    def test_configured_keys_apply_to_every_table(self, fmt: Format) -> None:
        text = '[package]\nversion = "1"\nname = "x"\n'
        assert fmt(text, keys=["name"]) == '[package]\nname = "x"\nversion = "1"\n'

    def test_dotted_keys_sort_by_full_name(self, fmt: Format) -> None:
        assert fmt("b.x = 1\na.y = 2\n") == "a.y = 2\nb.x = 1\n"

    def test_child_tables_are_sorted(self, fmt: Format) -> None:
        text = "[b]\ny = 1\nx = 2\n[a]\nz = 3\n"
        assert fmt(text) == "[a]\nz = 3\n[b]\nx = 2\ny = 1\n"


class TestSections:
    def test_sorting_stays_within_sections(self, fmt: Format) -> None:
        text = "# header\nb = 1\na = 2\n\nd = 3\nc = 4\n"
        assert fmt(text) == "# header\na = 2\nb = 1\n\nc = 4\nd = 3\n"

    def test_entry_comment_moves_with_entry(self, fmt: Format) -> None:
        assert fmt("b = 1\n# about a\na = 2\n") == "# about a\na = 2\nb = 1\n"

    def test_section_comment_and_entry_comment(self, fmt: Format) -> None:
        text = "x = 0\n\n# section\nb = 1\n# about a\na = 2\n"
        assert fmt(text) == "x = 0\n\n# section\n# about a\na = 2\nb = 1\n"

    def test_value_comment_is_kept(self, fmt: Format) -> None:
        assert fmt("b = 1   # one\na = 2\n") == "a = 2\nb = 1 # one\n"

    def test_indentation_is_kept(self, fmt: Format) -> None:
        assert fmt("[t]\n  b = 1\n  a = 2\n") == "[t]\n  a = 2\n  b = 1\n"

    def test_trailing_comments_are_kept(self, fmt: Format) -> None:
        assert fmt("a = 1\n\n# end\n\n\n") == "a = 1\n\n# end\n"

    def test_empty_document(self, fmt: Format) -> None:
        assert fmt("") == "\n"
        assert fmt("\n\n") == "\n"


class TestStrings:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("'hello'", '"hello"'),
            ("'C:\\path'", "'C:\\path'"),
            ("'say \"hi\"'", "'say \"hi\"'"),
            ("'''multi'''", "'''multi'''"),
            ('"already"', '"already"'),
            ("''", "''"),
        ],
    )
    def test_normalize_quotes(self, raw: str, expected: str) -> None:
        assert normalize_quotes(raw) == expected

    def test_literal_string_value(self, fmt: Format) -> None:
        assert fmt("a = 'hello'\n") == 'a = "hello"\n'


class TestArrays:
    def test_inline_array_spacing(self, fmt: Format) -> None:
        assert fmt('x = [3,"b"]\n') == 'x = [ 3, "b" ]\n'

    def test_empty_array(self, fmt: Format) -> None:
        assert fmt("x = [  ]\n") == "x = []\n"

    def test_sort_strings_before_other_values(self, fmt: Format) -> None:
        assert fmt('x = [3, "b", 1, "a"]\n', sort_arrays=True) == 'x = [ "a", "b", 3, 1 ]\n'

    def test_arrays_unsorted_by_default(self, fmt: Format) -> None:
        assert fmt('x = ["b", "a"]\n') == 'x = [ "b", "a" ]\n'

    def test_multiline_array(self, fmt: Format) -> None:
        text = 'deps = [\n  "b",  # comment b\n  "a"\n]\n'
        assert fmt(text) == 'deps = [\n\t"b", # comment b\n\t"a",\n]\n'

    def test_multiline_array_sorted(self, fmt: Format) -> None:
        text = 'deps = [\n    "b",\n    "a",\n]\n'
        assert fmt(text, sort_arrays=True) == 'deps = [\n\t"a",\n\t"b",\n]\n'

    def test_comment_before_comma_moves_after_it(self, fmt: Format) -> None:
        text = 'deps = [\n  "a" # first\n  , "b" # last\n]\n'
        assert fmt(text) == 'deps = [\n\t"a", # first\n\t"b", # last\n]\n'

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("a = [1, # keep me\n]\n", "a = [\n\t1, # keep me\n]\n"),
            ("a = [ # c\n]\n", "a = [ # c\n]\n"),
        ],
    )
    def test_comment_before_closing_bracket_is_kept(self, fmt: Format, text: str, expected: str) -> None:
        assert fmt(text) == expected
        assert fmt(expected) == expected

    def test_sorted_values_keep_their_comments(self, fmt: Format) -> None:
        text = 'a = [\n  "z", # zed\n  "a", # ay\n]\n'
        expected = 'a = [\n\t"a", # ay\n\t"z", # zed\n]\n'
        assert fmt(text, sort_arrays=True) == expected
        assert fmt(expected, sort_arrays=True) == expected

    def test_bracket_line_comment_stays_first(self, fmt: Format) -> None:
        text = 'a = [ # deps\n  "b",\n  "a",\n]\n'
        assert fmt(text, sort_arrays=True) == 'a = [ # deps\n\t"a",\n\t"b",\n]\n'

    def test_comment_after_array_is_kept(self, fmt: Format) -> None:
        assert fmt("x = [1, 2]  # numbers\n") == "x = [ 1, 2 ] # numbers\n"

    def test_nested_arrays(self, fmt: Format) -> None:
        assert fmt("x = [[1,2],[3]]\n") == "x = [ [ 1, 2 ], [ 3 ] ]\n"


class TestInlineTables:
    def test_keys_sorted_and_spaced(self, fmt: Format) -> None:
        assert fmt("x = {b=1, a = 2}\n") == "x = { a = 2, b = 1 }\n"

    def test_inline_keys_priority(self, fmt: Format) -> None:
        assert fmt("x = {a = 1, b = 2}\n", inline_keys=["b"]) == "x = { b = 2, a = 1 }\n"

    def test_standard_keys_do_not_apply_inline(self, fmt: Format) -> None:
        assert fmt("x = {a = 1, b = 2}\n", keys=["b"]) == "x = { a = 1, b = 2 }\n"

    def test_empty_inline_table(self, fmt: Format) -> None:
        assert fmt("x = {}\n") == "x = {}\n"

    def test_inline_tables_in_array(self, fmt: Format) -> None:
        assert fmt("x = [{y=2},{x=1}]\n") == "x = [ { y = 2 }, { x = 1 } ]\n"


class TestDocument:
    def test_array_of_tables_untouched(self, fmt: Format) -> None:
        text = "name = 'x'\n\n[[bin]]\nb = 1\na = 'y'\n"
        assert fmt(text) == 'name = "x"\n\n[[bin]]\nb = 1\na = \'y\'\n'

    def test_cargo_manifest(self, fmt: Format) -> None:
        expected = """\
# Package metadata
[package]
name = "demo"
version = "0.1.0"
authors = [ "a", "b" ]

[[bin]]
name = "tool"
path = 'src/main.rs'

[dependencies]
anyhow = "1" # errors
serde = { features = [ "derive" ], version = "1" }

# local crates
alpha = { path = "../alpha" }
zeta = { path = "../zeta" }

# trailing note
"""
        assert fmt(CARGO, keys=["package", "name", "version"], sort_arrays=True) == expected

    @pytest.mark.parametrize(
        "text",
        [
            CARGO,
            "# a\nb = 1 # b\n# c\na = [\n  2, # d\n  1 # e\n] # f\n\n# g\n",
        ],
    )
    def test_comments_are_preserved(self, fmt: Format, text: str) -> None:
        comments = sorted(re.findall(r"#[^\n]*", text))
        assert sorted(re.findall(r"#[^\n]*", fmt(text, sort_arrays=True))) == comments

    def test_idempotent(self, fmt: Format) -> None:
        once = fmt(CARGO, keys=["package", "name", "version"], inline_keys=["version"], sort_arrays=True)
        assert fmt(once, keys=["package", "name", "version"], inline_keys=["version"], sort_arrays=True) == once

    def test_input_tree_is_not_modified(self) -> None:
        document = read_document("b = [ 'x', 'a' ]\na = { z = 1, y = 2 }\n")
        before = document.root.model_dump()

        Maid(Config(sort_arrays=True).process()).format_document(document)

        assert document.root.model_dump() == before

    def test_formatter_returns_new_table(self) -> None:
        document = read_document("b = 1\na = 2\n")
        formatted = TomlFormatter().format_table(document.root)

        assert formatted is not document.root
        assert [entry.key.name for entry in formatted.entries] == ["a", "b"]
        assert [entry.key.name for entry in document.root.entries] == ["b", "a"]
