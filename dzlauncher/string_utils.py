"""Small text helpers used throughout the launcher."""

import os
from itertools import groupby

DEFAULT_TRIM_CHARS = " \n\r\t\0"


def remove_elements_from_path(text, remove_slash=True, count=1):
    """Drop the last ``count`` slash-separated elements of ``text``.

    When fewer slashes than ``count`` exist, everything from the first slash
    on is dropped. With ``remove_slash`` false the cut-off slash is kept.
    """
    if not text:
        return text
    slashes = [index for index, char in enumerate(text) if char == "/"]
    if count == 0:
        position = 0
    elif not slashes:
        return text
    elif 0 < count <= len(slashes):
        position = slashes[-count]
    else:
        position = slashes[0]
    if not remove_slash:
        position += 1
    return text[:position]


def replace(text, old, new):
    """Replace occurrences of ``old`` with ``new``.

    After each replacement the search resumes two characters past the end of
    the inserted text, so adjacent matches may be left alone.
    """
    if not old:
        return text
    start = 0
    while True:
        found = text.find(old, start)
        if found == -1:
            return text
        text = text[:found] + new + text[found + len(old):]
        start = found + len(new) - len(old) + 2
        if start < 0:
            return text


def split(text, delimiters):
    """Split ``text`` on runs of any character in ``delimiters``, dropping empty parts."""
    return [
        "".join(chars)
        for is_delimiter, chars in groupby(text, key=lambda char: char in delimiters)
        if not is_delimiter
    ]


def trim_left(text, chars=DEFAULT_TRIM_CHARS):
    """Strip ``chars`` from the start of ``text``."""
    return text.lstrip(chars) if chars else text


def trim_right(text, chars=DEFAULT_TRIM_CHARS):
    """Strip ``chars`` from the end of ``text``."""
    return text.rstrip(chars) if chars else text


def trim(text, chars=DEFAULT_TRIM_CHARS):
    """Strip ``chars`` from both ends of ``text``."""
    return trim_left(trim_right(text, chars), chars)


def to_windows_path(path, drive_letter="C"):
    """Turn a Unix path into a Windows-style path on ``drive_letter``."""
    text = os.fspath(path)
    if not text:
        return text
    converted = replace(text, "/", "\\")
    if text.startswith("/"):
        return f"{drive_letter}:{converted}"
    return converted