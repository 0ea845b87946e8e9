"""A game mod directory and the key/value data in its ``.cpp`` files."""

import os
import re
from pathlib import Path

from .exceptions import DirectoryNotFoundError
from .fs_utils import list_dir
from .std_utils import read_text
from .string_utils import split, trim

_UNQUOTED_WHITESPACE = re.compile(r'\s+(?=(?:[^"]*"[^"]*")*[^"]*\Z)')


def _remove_unquoted_whitespace(text):
    return _UNQUOTED_WHITESPACE.sub("", text)


def parse_mod_cpp(text):
    """Parse ``key = "value";`` statements of a mod ``.cpp`` file into a dict."""
    result = {}
    for line in split(_remove_unquoted_whitespace(text), ";"):
        split_place = line.find("=")
        if split_place == -1:
            continue
        value_start = split_place + 1
        value_end = len(line)
        if value_start < len(line) and line[value_start] == '"':
            value_start += 1
        if line[value_end - 1] == '"':
            value_end -= 1
        key = trim(line[:split_place])
        result[key] = trim(line[value_start:value_end])
    return result


class Mod:
    """A mod directory that holds an ``addons`` subdirectory."""

    def __init__(self, path):
        self.path = Path(path)
        self.key_values = {}
        if "addons" not in list_dir(self.path, True):
            raise DirectoryNotFoundError(self.path / "addons")

        self.load_all_cpp()
        if self.key_values.get("publishedid", "0") == "0":
            self.key_values["publishedid"] = self.path.name

    def lookup(self, *keys, default):
        """Return the value of the first of ``keys`` that is set, else ``default``."""
        for key in keys:
            if key in self.key_values:
                return self.key_values[key]
        return default

    def name(self):
        """Human-readable name of the mod."""
        return self.lookup("name", "dir", "tooltip", "publishedid", default=self.path.name)

    def load_all_cpp(self):
        """Merge the key/values of every ``.cpp`` file in the mod directory."""
        for filename in list_dir(self.path):
            if filename.endswith(".cpp"):
                self.load_from_text(read_text(self.path / filename), True)

    def load_from_text(self, text, append=False):
        """Parse ``text``; unless ``append`` is set, previous entries are dropped."""
        if not append:
            self.key_values.clear()
        self.key_values.update(parse_mod_cpp(text))

    def is_workshop_mod(self, workshop_path):
        """Return whether the mod lives below ``workshop_path``."""
        return os.fspath(workshop_path) in str(self.path)

    def __eq__(self, other):
        if not isinstance(other, Mod):
            return NotImplemented
        return self.path == other.path and self.key_values == other.key_values

    __hash__ = None

    def __str__(self):
        lines = [f"Path: {self.path}\n"]
        lines.extend(f"Key: {key} Value: {value}\n" for key, value in sorted(self.key_values.items()))
        return "".join(lines)

    def __repr__(self):
        return f"Mod({str(self.path)!r})"