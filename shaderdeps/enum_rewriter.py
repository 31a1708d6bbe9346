"""
Enum declaration rewriting for shared headers.

Headers shared between the host code and the shaders may declare C or C++
enums. GLSL has no enum type, so each declaration is turned into a define and
a list of unsigned constants:

    enum eMyEnum : uint32_t {
      ENUM_1 = 0u,
      ENUM_2 = 1u,
    };

becomes

    #define eMyEnum uint
    const uint ENUM_1 = 0u, ENUM_2 = 1u;

Requirements on the input:
- C++ enums need `uint32_t` as underlying type to be usable in UBO/SSBO.
- Values must be constant literals with the `u` suffix.
"""

import re

from loguru import logger

from shaderdeps.errors import Diagnostic, ErrorKind
from shaderdeps.scanner import NOT_FOUND, find_keyword, find_token

_COMMENT_PATTERN = re.compile(r"/\*.*?\*/|//[^\n]*", re.DOTALL)


def _flatten_values(values: str) -> str:
    """Join an enum value list on a single line without its trailing comma."""
    flat = " ".join(_COMMENT_PATTERN.sub(" ", values).split())
    if flat.endswith(","):
        flat = flat[:-1].rstrip()
    return flat


def rewrite_enums(
    text: str, path: str, extended: bool = False
) -> tuple[str | None, list[Diagnostic]]:
    """Rewrite every enum declaration of a header into defines and constants.

    Args:
        text: Header content
        path: Path reported in diagnostics
        extended: Whether the header is a C++ header, whose enums must
            declare a `uint32_t` underlying type

    Returns:
        Tuple containing:
        - The rewritten text, or None when no enum was rewritten
        - Diagnostics for every malformed declaration
    """
    output: list[str] = []
    diagnostics: list[Diagnostic] = []
    cursor = NOT_FOUND
    last_pos = 0

    def error(offset: int, message: str) -> None:
        diagnostics.append(
            Diagnostic.at(
                ErrorKind.MALFORMED_ENUM_DECLARATION, path, text, offset, message
            )
        )

    while True:
        cursor = find_keyword(text, "enum ", cursor + 1)
        if cursor == NOT_FOUND:
            break
        # Skip matches like `typedef enum eMyEnum eMyType;`
        if cursor >= 8 and text[cursor - 8 : cursor] == "typedef ":
            continue

        name_start = cursor + len("enum")
        values_start = find_token(text, "{", cursor)
        if values_start == NOT_FOUND:
            error(cursor, "Malformed enum class. Expected '{' after typename.")
            continue

        enum_name = text[name_start:values_start]
        if extended:
            name_end = find_token(enum_name, ":")
            if name_end == NOT_FOUND:
                error(name_start, "Expected ':' after C++ enum name.")
                continue
            if find_keyword(enum_name, "uint32_t", name_end) == NOT_FOUND:
                error(name_start, "C++ enums needs uint32_t underlying type.")
                continue
            enum_name = enum_name[:name_end]
        enum_name = enum_name.strip()
        if not enum_name:
            error(cursor, "Expected enum type name.")
            continue

        values_end = find_token(text, "}", values_start)
        if values_end == NOT_FOUND:
            error(cursor, "Malformed enum class. Expected '}' after values.")
            continue

        values = text[values_start + 1 : values_end]
        # Really poor check, nested braces mean the '}' found is not ours
        nested = find_token(values, "{")
        if nested != NOT_FOUND:
            error(
                values_start + 1 + nested, "Unexpected '{' token inside enum values."
            )
            continue

        if text[values_end + 1 : values_end + 2] != ";":
            error(values_end + 1, "Expected ';' after enum type declaration.")
            continue

        output.append(text[last_pos:cursor])
        output.append(f"#define {enum_name} uint\n")
        output.append(f"const uint {_flatten_values(values)}")
        logger.debug(f"Rewrote enum {enum_name} in {path}")

        # Skip the closing brace but keep the semicolon
        cursor = last_pos = values_end + 1

    if last_pos == 0:
        return None, diagnostics

    output.append(text[last_pos:])
    return "".join(output), diagnostics
