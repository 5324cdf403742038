"""Text helpers shared by search and reference scanning."""

from __future__ import annotations

from typing import Iterator, Tuple


def normalize_query(text: str) -> str:
    """Collapse whitespace and casefold text for fuzzy comparison."""
    return " ".join(text.split()).casefold()


def _is_word_char(char: str) -> bool:
    return char.isascii() and char.isalnum()


def is_boundary_char(char: str) -> bool:
    """Return True if ``char`` separates words.

    ASCII letters, digits and hyphens are word-internal. Everything else,
    including accented and non-Latin letters, is a boundary.
    """
    return not (_is_word_char(char) or char == "-")


def is_whole_word(text: str, start: int, length: int) -> bool:
    """Check that ``text[start:start + length]`` sits between word boundaries."""
    end = start + length
    if start > 0 and not is_boundary_char(text[start - 1]):
        return False
    if end < len(text) and not is_boundary_char(text[end]):
        return False
    return True


def iter_occurrences(text: str, needle: str) -> Iterator[int]:
    """Yield every start offset of ``needle`` in ``text``, ignoring case.

    Offsets always refer to ``text`` itself, including overlapping hits.
    """
    if not needle:
        return
    folded_text = text.lower()
    folded_needle = needle.lower()

    if len(folded_text) != len(text) or len(folded_needle) != len(needle):
        # Lowercasing changed the length of some characters, so offsets into
        # the folded copy would drift. Compare window by window instead.
        size = len(needle)
        for start in range(len(text) - size + 1):
            if text[start : start + size].lower() == folded_needle:
                yield start
        return

    start = folded_text.find(folded_needle)
    while start != -1:
        yield start
        start = folded_text.find(folded_needle, start + 1)


def _is_digit(char: str) -> bool:
    return "0" <= char <= "9"


def iter_numeric_tokens(text: str) -> Iterator[Tuple[int, str]]:
    """Yield ``(offset, token)`` for dotted numeric tokens such as ``7.21.3``.

    A token is a run of digits optionally followed by ``.digits`` groups. It
    must not touch an ASCII letter or digit on either side, so ``12mg`` or ``A7``
    produce nothing while a trailing sentence dot (``see 7.``) is left out.
    """
    size = len(text)
    index = 0
    while index < size:
        if not _is_digit(text[index]):
            index += 1
            continue

        end = index
        while end < size and _is_digit(text[end]):
            end += 1
        while end + 1 < size and text[end] == "." and _is_digit(text[end + 1]):
            end += 1
            while end < size and _is_digit(text[end]):
                end += 1

        glued = (index > 0 and _is_word_char(text[index - 1])) or (end < size and _is_word_char(text[end]))
        if not glued:
            yield index, text[index:end]
        index = end


def dotted_to_hyphenated(token: str) -> str:
    """Map a dotted numeric token to its hyphenated id form (``7.21`` -> ``7-21``)."""
    return token.replace(".", "-")
