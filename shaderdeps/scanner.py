"""
Comment-aware text search primitives.

Every higher level scan of shader text (enum rewriting, function extraction)
goes through these helpers so that matches inside `/* */` or `//` comments are
ignored. Keyword variants additionally reject matches that are the suffix of
a longer identifier.
"""

from shaderdeps.constants import KEYWORD_BOUNDARY_CHARS

NOT_FOUND = -1


def _rfind_at(text: str, token: str, offset: int) -> int:
    """Find the last occurrence of `token` starting at or before `offset`."""
    if offset < 0:
        return NOT_FOUND
    return text.rfind(token, 0, offset + len(token))


def is_in_comment(text: str, offset: int) -> bool:
    """Check whether `offset` lies inside a block or line comment.

    Args:
        text: Text to inspect
        offset: Position of a match inside `text`

    Returns:
        True if the closest comment opener before `offset` is not closed yet
    """
    in_block = _rfind_at(text, "/*", offset) > _rfind_at(text, "*/", offset)
    in_line = _rfind_at(text, "//", offset) > _rfind_at(text, "\n", offset)
    return in_block or in_line


def _find(
    text: str, token: str, offset: int, whole_word: bool, reverse: bool
) -> int:
    step = -1 if reverse else 1
    while True:
        if reverse:
            offset = _rfind_at(text, token, offset)
        else:
            offset = text.find(token, max(offset, 0))
        if offset > 0:
            if whole_word and text[offset - 1] not in KEYWORD_BOUNDARY_CHARS:
                offset += step
                continue
            if is_in_comment(text, offset):
                offset += step
                continue
        return offset


def find_keyword(text: str, keyword: str, offset: int = 0) -> int:
    """Find the next whole-word occurrence of `keyword` outside comments.

    Args:
        text: Text to search
        keyword: Keyword to look for
        offset: Position to start searching from

    Returns:
        Offset of the match, or NOT_FOUND
    """
    return _find(text, keyword, offset, whole_word=True, reverse=False)


def rfind_keyword(text: str, keyword: str, offset: int | None = None) -> int:
    """Find the previous whole-word occurrence of `keyword` outside comments."""
    if offset is None:
        offset = len(text)
    return _find(text, keyword, offset, whole_word=True, reverse=True)


def find_token(text: str, token: str, offset: int = 0) -> int:
    """Find the next occurrence of `token` outside comments."""
    return _find(text, token, offset, whole_word=False, reverse=False)


def rfind_token(text: str, token: str, offset: int | None = None) -> int:
    """Find the previous occurrence of `token` outside comments."""
    if offset is None:
        offset = len(text)
    return _find(text, token, offset, whole_word=False, reverse=True)


def line_and_column(text: str, offset: int) -> tuple[int, int]:
    """Convert an offset into 1-based line and column numbers."""
    offset = min(max(offset, 0), len(text))
    line = text.count("\n", 0, offset) + 1
    line_start = text.rfind("\n", 0, offset) + 1
    return line, offset - line_start + 1


def line_at(text: str, offset: int) -> str:
    """Return the full line of `text` containing `offset`."""
    offset = min(max(offset, 0), len(text))
    line_start = text.rfind("\n", 0, offset) + 1
    line_end = text.find("\n", offset)
    if line_end == NOT_FOUND:
        line_end = len(text)
    return text[line_start:line_end]
