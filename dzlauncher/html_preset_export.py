"""Export of a mod list as an HTML preset file understood by the game launcher."""

import os

from .string_utils import trim_right

PROJECT_URL = "https://example.com/dayz-unix-launcher"

_WORKSHOP_ITEM_URL = "http://steamcommunity.com/sharedfiles/filedetails/?id={}"

_STYLE_RULES = (
    ("body", ("background: rgb(25, 81, 147)", "color: white", "margin: 0px")),
    ("td", ("padding: 3px 30px 3px 0",)),
    ("h1", ("padding: 20px 20px 0 20px", "font-weight: 200", "font-size: 3em", "margin: 0")),
    ("em", ("font-variant: italic", "color: silver")),
    (".before-list", ("padding: 5px 20px 10px 20px",)),
    (".mod-list", ("background: rgb(45, 48, 59)", "padding: 20px", "height: 100%")),
    (".dlc-list", ("background: #222222", "padding: 20px")),
    (".footer", ("padding-top: 20px", "color: gray")),
    (".whups", ("color: gray",)),
    ("a", ("color: #D18F21", "text-decoration: underline")),
    ("a:hover", ("color: #F1AF41", "text-decoration: none")),
    (".from-steam", ("color: #449EBD",)),
    (".from-local", ("color: gray",)),
)


def _render(lines):
    """Join ``(depth, text)`` pairs into lines indented by two spaces per level."""
    return "\n".join("  " * depth + text for depth, text in lines)


def _stylesheet():
    blocks = []
    for selector, declarations in _STYLE_RULES:
        body = "".join(f"    {declaration};\n" for declaration in declarations)
        blocks.append(f"{selector} {{\n{body}}}\n")
    return "".join(blocks)


def _row(mod_name, source_class, source_label, link_lines):
    lines = [
        (4, '<tr data-type="ModContainer">'),
        (5, f'<td data-type="DisplayName">{mod_name}</td>'),
        (5, "<td>"),
        (6, f'<span class="{source_class}">{source_label}</span>'),
        (5, "</td>"),
        (5, "<td>"),
        *link_lines,
        (5, "</td>"),
        (4, "</tr>"),
    ]
    return _render(lines) + "\n"


def _mod_row(mod, workshop_path):
    if mod.is_workshop_mod(workshop_path):
        link = _WORKSHOP_ITEM_URL.format(mod.path.name)
        return _row(
            mod.name(),
            "from-steam",
            "Steam",
            [(6, f'<a href="{link}" data-type="Link">{link}</a>')],
        )
    link = mod.lookup("url", "action", default=PROJECT_URL)
    meta = f"local:{mod.name()}|{mod.path.name}|{link}"
    return _row(
        mod.name(),
        "from-local",
        "Local",
        [
            (6, f'<span class="whups" data-type="Link" data-meta="{meta}">'),
            (7, f'<a href="{link}">{link}</a>'),
            (6, "</span>"),
        ],
    )


def export_mods(preset_name, mods, workshop_path):
    """Return an HTML preset named ``preset_name`` listing ``mods``.

    Mods below ``workshop_path`` are listed as Steam Workshop items, the others
    as local mods.
    """
    workshop_path = os.fspath(workshop_path)
    mod_list = trim_right("".join(_mod_row(mod, workshop_path) for mod in mods))
    document = [
        (0, '<?xml version="1.0" encoding="utf-8"?>'),
        (0, "<html>"),
        (1, f"<!--Exported with Unix Launcher: {PROJECT_URL}-->"),
        (1, "<head>"),
        (2, '<meta name="arma:Type" content="preset" />'),
        (2, f'<meta name="arma:PresetName" content="{preset_name}" />'),
        (2, '<meta name="generator" content="Arma 3 Launcher" />'),
        (2, f"<title>A3UL preset - {preset_name}</title>"),
        (2, "<style>"),
        (0, _stylesheet() + "</style>"),
        (1, "</head>"),
        (1, "<body>"),
        (2, f"<h1>Arma 3 - Preset <strong>{preset_name}</strong></h1>"),
        (2, '<p class="before-list">'),
        (3, "<em>Drag this file or link to it to Arma 3 Launcher or open it Mods / Preset / Import.</em>"),
        (2, "</p>"),
        (2, '<div class="mod-list">'),
        (3, "<table>"),
        (0, mod_list),
        (3, "</table>"),
        (2, "</div>"),
        (2, '<div class="dlc-list">'),
        (3, "<table/>"),
        (2, "</div>"),
        (2, '<div class="footer">'),
        (3, f'<span>Exported with <a href="{PROJECT_URL}">Unix Launcher</a>.</span>'),
        (2, "</div>"),
        (1, "</body>"),
        (0, "</html>"),
    ]
    return _render(document) + "\n"