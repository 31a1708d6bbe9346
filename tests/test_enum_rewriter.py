"""Tests for the enum declaration rewriting of shared headers."""

import textwrap

from shaderdeps.enum_rewriter import rewrite_enums
from shaderdeps.errors import ErrorKind


class TestRewriteEnums:
    """Test cases for the rewrite_enums function."""

    def test_no_enum_is_noop(self):
        """Text without enums is not materialized again."""
        # Arrange
        text = "struct Foo {\n  uint a;\n};\n"

        # Act
        processed, diagnostics = rewrite_enums(text, "foo.h")

        # Assert
        assert processed is None
        assert diagnostics == []

    def test_c_enum(self):
        """Test rewriting a plain C enum."""
        # Arrange
        text = textwrap.dedent(
            """\
            #define BEFORE 1
            enum eMyEnum {
              ENUM_1 = 0u,
              ENUM_2 = 1u,
              ENUM_3 = 2u,
            };
            struct After {};
            """
        )

        # Act
        processed, diagnostics = rewrite_enums(text, "foo.h")

        # Assert
        assert diagnostics == []
        assert processed == (
            "#define BEFORE 1\n"
            "#define eMyEnum uint\n"
            "const uint ENUM_1 = 0u, ENUM_2 = 1u, ENUM_3 = 2u;\n"
            "struct After {};\n"
        )

    def test_cpp_enum_with_underlying_type(self):
        """Test rewriting a C++ enum with a uint32_t underlying type."""
        # Arrange
        text = "enum eMyEnum : uint32_t {\n  A = 0u,\n  B = 1u\n};\n"

        # Act
        processed, diagnostics = rewrite_enums(text, "foo.hh", extended=True)

        # Assert
        assert diagnostics == []
        assert processed == "#define eMyEnum uint\nconst uint A = 0u, B = 1u;\n"

    def test_single_block_round_trip(self):
        """A single enum gives one define line and one constant line."""
        # Arrange
        prefix = "/* header */\nstruct S { uint a; };\n"
        suffix = "\nfloat f(uint x) { return float(x); }\n"
        text = prefix + "enum eA { X = 1u, Y = 2u, };" + suffix

        # Act
        processed, _ = rewrite_enums(text, "foo.h")

        # Assert
        assert processed.startswith(prefix)
        assert processed.endswith(";" + suffix)
        rewritten = processed[len(prefix) : -len(";" + suffix)]
        assert rewritten.split("\n") == [
            "#define eA uint",
            "const uint X = 1u, Y = 2u",
        ]

    def test_multiple_enums(self):
        # Arrange
        text = "enum eA {\n  A = 0u,\n};\nint x;\nenum eB {\n  B = 0u,\n};\n"

        # Act
        processed, diagnostics = rewrite_enums(text, "foo.h")

        # Assert
        assert diagnostics == []
        assert processed == (
            "#define eA uint\nconst uint A = 0u;\n"
            "int x;\n"
            "#define eB uint\nconst uint B = 0u;\n"
        )

    def test_comments_in_values_are_dropped(self):
        # Arrange
        text = "enum eA {\n  A = 0u, /* first */\n  B = 1u, // second\n};\n"

        # Act
        processed, _ = rewrite_enums(text, "foo.h")

        # Assert
        assert processed == "#define eA uint\nconst uint A = 0u, B = 1u;\n"

    def test_typedef_is_skipped(self):
        """typedef aliases are not declarations."""
        # Arrange
        text = "typedef enum eMyEnum eMyType;\n"

        # Act
        processed, diagnostics = rewrite_enums(text, "foo.h")

        # Assert
        assert processed is None
        assert diagnostics == []

    def test_enum_in_comment_is_skipped(self):
        text = "// the enum values below\nuint x;\n/* enum eA { A = 0u }; */\n"
        processed, diagnostics = rewrite_enums(text, "foo.h")
        assert processed is None
        assert diagnostics == []

    def test_identifier_suffix_is_not_keyword(self):
        text = "uint my_enum = 0u;\n"
        processed, _ = rewrite_enums(text, "foo.h")
        assert processed is None


class TestRewriteEnumsErrors:
    """Test cases for malformed enum declarations."""

    def test_missing_underlying_type(self):
        """C++ enums must declare an underlying type."""
        # Arrange
        text = "enum eMyEnum {\n  A = 0u,\n};\n"

        # Act
        processed, diagnostics = rewrite_enums(text, "foo.hh", extended=True)

        # Assert
        assert processed is None
        assert len(diagnostics) == 1
        assert diagnostics[0].kind is ErrorKind.MALFORMED_ENUM_DECLARATION
        assert "':'" in diagnostics[0].message

    def test_wrong_underlying_type(self):
        text = "enum eMyEnum : int {\n  A = 0,\n};\n"
        _, diagnostics = rewrite_enums(text, "foo.hh", extended=True)
        assert len(diagnostics) == 1
        assert "uint32_t" in diagnostics[0].message

    def test_missing_semicolon(self):
        # Arrange
        text = "enum eA {\n  A = 0u,\n}\nint x;\n"

        # Act
        processed, diagnostics = rewrite_enums(text, "shaders/foo.h")

        # Assert
        assert processed is None
        assert len(diagnostics) == 1
        diagnostic = diagnostics[0]
        assert diagnostic.message == "Expected ';' after enum type declaration."
        assert diagnostic.path == "shaders/foo.h"
        assert (diagnostic.line, diagnostic.column) == (3, 2)

    def test_nested_brace(self):
        text = "enum eA {\n  A = 0u,\n  struct { int b; } c;\n};\n"
        _, diagnostics = rewrite_enums(text, "foo.h")
        assert [d.kind for d in diagnostics] == [ErrorKind.MALFORMED_ENUM_DECLARATION]
        assert "Unexpected '{'" in diagnostics[0].message
        assert diagnostics[0].line == 3

    def test_unterminated_values(self):
        """An enum whose value list never closes is reported at the keyword."""
        # Arrange
        text = "int x;\nenum eA {\n  A = 0u,\n"

        # Act
        processed, diagnostics = rewrite_enums(text, "shaders/foo.h")

        # Assert
        assert processed is None
        assert len(diagnostics) == 1
        diagnostic = diagnostics[0]
        assert diagnostic.kind is ErrorKind.MALFORMED_ENUM_DECLARATION
        assert diagnostic.message == "Malformed enum class. Expected '}' after values."
        assert (diagnostic.line, diagnostic.column) == (2, 1)

    def test_missing_opening_brace(self):
        text = "enum eA;\n"
        processed, diagnostics = rewrite_enums(text, "foo.h")
        assert processed is None
        assert "Expected '{'" in diagnostics[0].message

    def test_scan_continues_after_error(self):
        """Errors are reported for every malformed enum and valid ones still rewrite."""
        # Arrange
        text = (
            "enum eBad {\n  A = 0u,\n}\n"
            "enum eGood {\n  B = 0u,\n};\n"
            "enum eWorse {\n  C = 0u,\n}\n"
        )

        # Act
        processed, diagnostics = rewrite_enums(text, "foo.h")

        # Assert
        assert len(diagnostics) == 2
        assert [d.line for d in diagnostics] == [3, 9]
        assert "#define eGood uint\nconst uint B = 0u;\n" in processed
        assert processed.startswith("enum eBad {")
