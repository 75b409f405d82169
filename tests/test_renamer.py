"""
Tests for whole-word symbol renaming.
"""

import pytest

from bundlecxx.config import RenameConfig
from bundlecxx.refactoring import (
    RenameReport,
    SymbolRenamer,
    build_word_pattern,
    extract_display_name,
)
from bundlecxx.symbols import SymbolEntry


@pytest.fixture
def renamer():
    return SymbolRenamer(RenameConfig(line_ending="lf"))


class TestExtractDisplayName:
    """Tests for pulling the bare identifier out of kind_display_name."""

    @pytest.mark.parametrize(
        "kind_display_name, expected",
        [
            ("functionFoo", "functionFoo"),
            ("FUNCTION_DECL:foo(int, char)", "foo"),
            ("VAR_DECL:counter", "counter"),
            ("ns::detail::helper(void)", "helper"),
            ("CLASS_TEMPLATE:Vec<T>", "Vec"),
            ("  STRUCT_DECL:point  ", "point"),
            ("VAR_DECL:table[16]", "table"),
        ],
    )
    def test_extracts_identifier(self, kind_display_name, expected):
        assert extract_display_name(kind_display_name) == expected

    @pytest.mark.parametrize("kind_display_name", ["", "FUNCTION_DECL:", "(anonymous)", "123"])
    def test_no_identifier(self, kind_display_name):
        assert extract_display_name(kind_display_name) is None

    @pytest.mark.parametrize(
        "kind_display_name",
        [
            "STRUCT_DECL:struct (unnamed at a.c:1:1)",
            "ENUM_DECL:enum (unnamed at /tmp/src/x.c:3:1)",
            "UNION_DECL:union (anonymous at b.h:7:5)",
            "STRUCT_DECL:struct",
            "FUNCTION_DECL:operator+(const Vec &, const Vec &)",
        ],
    )
    def test_unnamed_records_and_keywords_are_rejected(self, kind_display_name):
        """Never yield a language keyword, which would be renamed file-wide."""
        assert extract_display_name(kind_display_name) is None


class TestBuildWordPattern:
    """Tests for the whole-word pattern."""

    def test_metacharacters_are_escaped(self):
        pattern = build_word_pattern("a.b")
        assert pattern.search("x a.b y")
        assert not pattern.search("x aXb y")

    def test_does_not_match_inside_identifiers(self):
        pattern = build_word_pattern("foo")
        assert pattern.findall("foo foobar _foo foo_ foo1 (foo)") == ["foo", "foo"]


class TestRenameText:
    """Tests for substitution over in-memory text."""

    def test_end_to_end_example(self, renamer):
        symbols = [SymbolEntry("a.c:10", "functionFoo", "bar")]
        text = "int functionFoo() { return functionFoo(); }"
        assert renamer.rename_text(text, symbols) == "int bar() { return bar(); }"

    def test_adjacent_identifiers_untouched(self, renamer):
        symbols = [SymbolEntry("a.c:1", "VAR_DECL:count", "lib_count")]
        text = "count = count_max + recount + count;"
        assert renamer.rename_text(text, symbols) == "lib_count = count_max + recount + lib_count;"

    def test_blank_new_names_leave_text_unchanged(self, renamer):
        symbols = [SymbolEntry("a.c:1", "foo", ""), SymbolEntry("a.c:2", "bar", "  ")]
        text = "foo(bar);"
        assert renamer.rename_text(text, symbols) == text

    def test_replacement_is_literal(self, renamer):
        """Backslashes in new names are not treated as group references."""
        symbols = [SymbolEntry("a.c:1", "foo", r"x\1")]
        assert renamer.rename_text("foo;", symbols) == "x\\1;"

    def test_multiple_symbols_and_report(self, renamer):
        symbols = [
            SymbolEntry("a.c:1", "FUNCTION_DECL:init(void)", "a_init"),
            SymbolEntry("a.c:5", "VAR_DECL:state", "a_state"),
            SymbolEntry("a.c:9", "(anonymous)", "ignored"),
        ]
        report = RenameReport(file_path="a.c")
        text = "static int state; void init(void) { state = 0; }"
        renamed = renamer.rename_text(text, symbols, report)

        assert renamed == "static int a_state; void a_init(void) { a_state = 0; }"
        assert report.replacements == {"init": 1, "state": 2}
        assert report.total_replacements == 3
        assert report.skipped == ["(anonymous)"]

    def test_unnamed_struct_row_leaves_keywords_alone(self, renamer):
        symbols = [SymbolEntry("a.c:1", "STRUCT_DECL:struct (unnamed at a.c:1:1)", "a_anon")]
        report = RenameReport(file_path="a.c")
        text = "struct { int a; } g;\nstruct pt { int x; };\n"

        assert renamer.rename_text(text, symbols, report) == text
        assert report.replacements == {}
        assert report.skipped == ["STRUCT_DECL:struct (unnamed at a.c:1:1)"]

    def test_renames_comments_and_strings_too(self, renamer):
        """The substitution is textual and not aware of comments or literals."""
        symbols = [SymbolEntry("a.c:1", "foo", "bar")]
        assert renamer.rename_text('/* foo */ puts("foo");', symbols) == '/* bar */ puts("bar");'


class TestRenameInFile:
    """Tests for renaming files on disk."""

    def test_rewrites_file(self, tmp_path, renamer):
        path = tmp_path / "a.c"
        path.write_text("int functionFoo() { return functionFoo(); }\n")
        report = renamer.rename_in_file(path, [SymbolEntry("a.c:10", "functionFoo", "bar")])

        assert path.read_text() == "int bar() { return bar(); }\n"
        assert report.written
        assert report.replacements == {"functionFoo": 2}

    def test_no_renames_leaves_file_untouched(self, tmp_path, renamer):
        path = tmp_path / "a.c"
        original = b"int foo;\r\nint bar;\r\n"
        path.write_bytes(original)
        report = renamer.rename_in_file(path, [SymbolEntry("a.c:1", "foo", "")])

        assert path.read_bytes() == original
        assert not report.written

    def test_line_endings_normalized_then_written_with_configured_eol(self, tmp_path):
        path = tmp_path / "a.c"
        path.write_bytes(b"int foo;\r\nint foo2;\r\n")
        renamer = SymbolRenamer(RenameConfig(line_ending="crlf"))
        renamer.rename_in_file(path, [SymbolEntry("a.c:1", "foo", "bar")])
        assert path.read_bytes() == b"int bar;\r\nint foo2;\r\n"

        lf_renamer = SymbolRenamer(RenameConfig(line_ending="lf"))
        lf_renamer.rename_in_file(path, [SymbolEntry("a.c:1", "bar", "baz")])
        assert path.read_bytes() == b"int baz;\nint foo2;\n"

    def test_undecodable_bytes_survive_the_rewrite(self, tmp_path, renamer):
        path = tmp_path / "a.c"
        path.write_bytes(b"/* caf\xe9 */\nint foo;\n")

        report = renamer.rename_in_file(path, [SymbolEntry("a.c:2", "foo", "bar")])

        assert report.replacements == {"foo": 1}
        assert path.read_bytes() == b"/* caf\xe9 */\nint bar;\n"
