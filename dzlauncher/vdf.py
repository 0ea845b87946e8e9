"""Reader for Valve's KeyValues (VDF) text format."""

from dataclasses import dataclass, field
from enum import Enum, auto

from .exceptions import SyntaxErrorException

_WHITESPACE = frozenset(" \t\n\v\f\r")


class _State(Enum):
    LOOKING_FOR_KEY = auto()
    LOOKING_FOR_VALUE = auto()
    READING_KEY = auto()
    READING_VALUE = auto()


def _remove_whitespace(text):
    """Drop whitespace that is not inside double quotes."""
    kept = []
    in_quotes = False
    for char in text:
        if char == '"':
            in_quotes = not in_quotes
        if in_quotes or char not in _WHITESPACE:
            kept.append(char)
    return "".join(kept)


def _parse(text):
    """Parse whitespace-free VDF text into a flat ``{"a/b/key": value}`` mapping."""
    pairs = {}
    state = _State.LOOKING_FOR_KEY
    key = ""
    value = ""
    hierarchy = []

    for char in text:
        if state is _State.LOOKING_FOR_KEY:
            if char == '"':
                state = _State.READING_KEY
            elif char == "}" and hierarchy:
                hierarchy.pop()
            else:
                raise SyntaxErrorException("VDF: Quote or bracket expected")
        elif state is _State.LOOKING_FOR_VALUE:
            if char == '"':
                state = _State.READING_VALUE
            elif char == "{":
                hierarchy.append(key)
                key = ""
                state = _State.LOOKING_FOR_KEY
            elif char == "}" and hierarchy:
                hierarchy.pop()
                key = ""
                state = _State.LOOKING_FOR_KEY
            else:
                raise SyntaxErrorException("VDF: Quote or bracket expected")
        elif state is _State.READING_KEY:
            if char == '"':
                state = _State.LOOKING_FOR_VALUE
            else:
                key += char
        else:
            if char == '"':
                pairs["/".join([*hierarchy, key])] = value
                key = ""
                value = ""
                state = _State.LOOKING_FOR_KEY
            else:
                value += char

    if hierarchy:
        raise SyntaxErrorException("Unclosed brackets in VDF")
    return pairs


@dataclass
class Vdf:
    """Flattened VDF document: nested keys are joined with ``/``."""

    key_values: dict = field(default_factory=dict)

    def load_from_text(self, text, append=False):
        """Parse ``text``; unless ``append`` is set, previous entries are dropped."""
        if not append:
            self.key_values.clear()
        self.key_values.update(_parse(_remove_whitespace(text)))

    def values_with_filter(self, pattern):
        """Return the values whose key contains ``pattern``, in key order."""
        return [value for key, value in sorted(self.key_values.items()) if pattern in key]