"""Removal of class blocks from game config (.cfg) text."""

from .exceptions import SyntaxErrorException


def _find_occurrences(text, class_name):
    positions = []
    position = text.find(class_name)
    while position != -1:
        positions.append(position)
        position = text.find(class_name, position + len(class_name))
    return positions


def _end_of_statement(text, position):
    """Return where a class block's trailing ``;`` statement ends, or None."""
    semicolon_found = newline_found = char_found = False
    for index in range(position, len(text)):
        char = text[index]
        if char == ";":
            semicolon_found = True
        elif char == "\n":
            newline_found = True
        elif char.isascii() and char.isalnum():
            char_found = True

        if semicolon_found and newline_found:
            return index + 1
        if semicolon_found and char_found:
            return index
    return None


def _class_boundaries(text, class_name, start):
    if text[start:start + len(class_name)] != class_name:
        raise SyntaxErrorException("Cannot find class name")

    bracket_position = text.find("{", start)
    if bracket_position == -1:
        raise SyntaxErrorException("Cannot find opening bracket")

    depth = 1
    position = bracket_position + 1
    escape = False
    in_string = False
    while position < len(text) and depth > 0:
        char = text[position]
        if escape:
            escape = False
        elif in_string and char == "\\":
            escape = True
        elif char == '"':
            in_string = not in_string
        elif not in_string:
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
        position += 1

    if depth != 0:
        raise SyntaxErrorException("Unclosed bracket")

    end = _end_of_statement(text, position)
    if end is None:
        raise SyntaxErrorException("Missing semicolon after class")
    return start, end


def remove_class(text, class_name):
    """Return ``text`` with every block starting with ``class_name`` cut out.

    ``class_name`` is the full header, e.g. ``"class ModLauncherList"``.
    """
    occurrences = _find_occurrences(text, class_name)
    result = text
    for occurrence in reversed(occurrences):
        start, end = _class_boundaries(text, class_name, occurrence)
        if end > len(result):
            raise SyntaxErrorException("Class boundaries out of range")
        result = result[:start] + result[end:]
    return result