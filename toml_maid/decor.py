"""Pure text transforms over decoration (whitespace and comment) strings."""

from __future__ import annotations

SPACES = " \t"
NEWLINES = ("\n", "\r\n")


def is_section_boundary(prefix: str) -> bool:
    """A prefix starting with a line break means a blank line precedes the entry."""
    return prefix.startswith(NEWLINES)


def strip_trailing_newlines(text: str) -> str:
    return text.rstrip("\r\n")


def trim(text: str) -> str:
    return text.strip()


def split_indent(prefix: str) -> tuple[str, str]:
    """Split a key prefix into the lines above the key and the key's own indentation."""
    head, newline, indent = prefix.rpartition("\n")
    if not newline:
        return "", prefix
    return head + newline, indent


def attach_section_prefix(section_prefix: str, prefix: str) -> str:
    """Put a section's leading lines in front of the entry that now opens it.

    The entry keeps its own prefix (indentation, comments) after those lines.
    """
    return section_prefix + prefix


def array_element_prefix(prefix: str) -> str:
    """Prefix of a value in a multiline array: comments kept, one tab of indentation."""
    text = prefix.strip(SPACES).rstrip("\r\n")
    text = f"{text}\n\t" if text else "\n\t"
    if not text.startswith("\n"):
        text = f" {text}"
    return text


def split_line_comment(prefix: str) -> tuple[str, str]:
    """Split off a comment that ends the line the prefix starts on.

    Returns the comment and the rest of the prefix, from the line break on.
    """
    line, newline, rest = prefix.partition("\n")
    comment = line.strip()
    if not newline or not comment:
        return "", prefix
    return comment, newline + rest


def join_comment(comment: str, text: str) -> str:
    """Put a comment carried over from the previous line in front of ``text``."""
    if not comment:
        return text
    return f"{comment}\n{text}"


def array_trailing(trailing: str) -> str:
    """Text before the closing bracket of a multiline array, ending in one newline."""
    text = f"{trailing.strip(SPACES).rstrip()}\n"
    if not text.startswith("\n"):
        text = f" {text}"
    return text


def surround(prefix: str, suffix: str, last: bool) -> tuple[str, str]:
    """Spacing for a value inside a container.

    Each value is preceded by one space. The last value of a container is
    followed by one space before the closing delimiter.
    """
    prefix = prefix.strip()
    suffix = suffix.strip()
    prefix = f" {prefix} " if prefix else " "
    suffix = f" {suffix}" if suffix else ""
    if last:
        suffix = f"{suffix} "
    return prefix, suffix
