# Copyright (c) 2025 - 2025, Oracle and/or its affiliates. All rights reserved.
# Licensed under the Universal Permissive License v 1.0 as shown at https://oss.oracle.com/licenses/upl/.

"""This module contains the lexical scanner for Gradle build scripts.

The scanner only knows about string literals, comments and braces, which is the common subset of the
Groovy and Kotlin DSLs needed to find configuration blocks such as ``publishing { ... }``. Anything else
in a script is treated as opaque text.
"""

from collections.abc import Iterator
from dataclasses import dataclass
from enum import IntEnum

DELIMITERS = frozenset("{}();, \t\n\r")
WHITESPACES = frozenset(" \t\n\r")


class CharacterKind(IntEnum):
    """The lexical category of a character in a Gradle script."""

    CODE = 0
    STRING = 1
    COMMENT = 2


@dataclass(frozen=True)
class BlockMatch:
    """A ``keyword { ... }`` block found in a Gradle script.

    ``body`` is the text strictly between the opening brace and its balancing closing brace.
    ``body_start`` and ``body_end`` are the offsets of that text in the scanned content.
    """

    keyword: str
    start: int
    body_start: int
    body_end: int
    body: str


def is_delimiter(char: str) -> bool:
    """Return True if the character can bound a keyword in a Gradle script."""
    return char in DELIMITERS


def is_whitespace(char: str) -> bool:
    """Return True if the character is a space, a tab, a newline or a carriage return."""
    return char in WHITESPACES


def _find_string_end(content: str, start: int) -> int:
    """Return the offset right after the string literal opened at ``start``.

    Triple-quoted literals may span several lines. Other literals end at the first unescaped closing quote
    or, when unterminated, at the end of the line.
    """
    quote = content[start]
    triple = quote * 3
    if content.startswith(triple, start):
        end = content.find(triple, start + 3)
        return len(content) if end == -1 else end + 3

    index = start + 1
    while index < len(content):
        char = content[index]
        if char == "\\":
            index += 2
            continue
        if char == quote:
            return index + 1
        if char == "\n":
            return index
        index += 1
    return len(content)


def classify_characters(content: str) -> bytearray:
    """Classify every character of a Gradle script as code, string literal or comment.

    Parameters
    ----------
    content : str
        The content of the script.

    Returns
    -------
    bytearray
        One ``CharacterKind`` value per character of ``content``.
    """
    kinds = bytearray(len(content))
    index = 0
    length = len(content)
    while index < length:
        char = content[index]
        if char in ('"', "'"):
            end = _find_string_end(content, index)
            kinds[index:end] = bytes([CharacterKind.STRING]) * (end - index)
            index = end
        elif content.startswith("//", index):
            end = content.find("\n", index)
            end = length if end == -1 else end
            kinds[index:end] = bytes([CharacterKind.COMMENT]) * (end - index)
            index = end
        elif content.startswith("/*", index):
            end = content.find("*/", index + 2)
            end = length if end == -1 else end + 2
            kinds[index:end] = bytes([CharacterKind.COMMENT]) * (end - index)
            index = end
        else:
            index += 1
    return kinds


def is_keyword_occurrence(content: str, kinds: bytearray, start: int, end: int) -> bool:
    """Return True if ``content[start:end]`` is code bounded by delimiters or by the content boundaries."""
    if any(kinds[start:end]):
        return False
    if start > 0 and not is_delimiter(content[start - 1]):
        return False
    return end == len(content) or is_delimiter(content[end])


def _skip_to_open_brace(content: str, kinds: bytearray, index: int) -> int | None:
    while index < len(content):
        if kinds[index] == CharacterKind.COMMENT or is_whitespace(content[index]):
            index += 1
            continue
        if content[index] == "{" and kinds[index] == CharacterKind.CODE:
            return index
        return None
    return None


def _find_closing_brace(content: str, kinds: bytearray, open_brace: int) -> int | None:
    depth = 0
    for index in range(open_brace, len(content)):
        if kinds[index] != CharacterKind.CODE:
            continue
        char = content[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return None


def iter_blocks(content: str, keyword: str) -> Iterator[BlockMatch]:
    """Yield every ``keyword { ... }`` block of a Gradle script in document order.

    An occurrence of ``keyword`` counts only if it is bounded by delimiters, it is not part of a string
    literal or a comment, and the next character that is neither whitespace nor a comment is an opening
    brace. Blocks of the same keyword nested inside a returned block are part of its body and are not
    yielded separately.

    Parameters
    ----------
    content : str
        The content of the script.
    keyword : str
        The name of the block, e.g. ``publishing``.

    Yields
    ------
    BlockMatch
        The block matches. Nothing is yielded for empty content, and scanning stops at the first
        block whose braces are not balanced.
    """
    if not content or not keyword:
        return

    kinds = classify_characters(content)
    search_from = 0
    while True:
        start = content.find(keyword, search_from)
        if start == -1:
            return

        end = start + len(keyword)
        if not is_keyword_occurrence(content, kinds, start, end):
            search_from = start + 1
            continue

        open_brace = _skip_to_open_brace(content, kinds, end)
        if open_brace is None:
            search_from = end
            continue

        close_brace = _find_closing_brace(content, kinds, open_brace)
        if close_brace is None:
            return

        yield BlockMatch(
            keyword=keyword,
            start=start,
            body_start=open_brace + 1,
            body_end=close_brace,
            body=content[open_brace + 1 : close_brace],
        )
        search_from = close_brace + 1


def extract_all_blocks(content: str, keyword: str) -> list[str]:
    """Return the bodies of all ``keyword { ... }`` blocks of a Gradle script in document order.

    >>> extract_all_blocks('ext { a = "1" }\\ndescription = "ext { }"', "ext")
    [' a = "1" ']
    """
    return [block.body for block in iter_blocks(content, keyword)]


def mask_nested_blocks(content: str) -> str:
    """Blank out everything inside braces and every comment, keeping only top-level statements.

    The outermost braces and all newlines are kept so that line-based patterns and offsets still line up
    with the original content.

    Parameters
    ----------
    content : str
        The content of the script.

    Returns
    -------
    str
        The masked content, with the same length as ``content``.
    """
    kinds = classify_characters(content)
    masked: list[str] = []
    depth = 0
    for index, char in enumerate(content):
        kind = kinds[index]
        if kind == CharacterKind.CODE and char == "{":
            masked.append(char if depth == 0 else " ")
            depth += 1
        elif kind == CharacterKind.CODE and char == "}" and depth > 0:
            depth -= 1
            masked.append(char if depth == 0 else " ")
        elif depth > 0 or kind == CharacterKind.COMMENT:
            masked.append("\n" if char == "\n" else " ")
        else:
            masked.append(char)
    return "".join(masked)
