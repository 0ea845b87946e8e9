"""Steam discovery, mod management, config writing and game launching for DayZ."""

__version__ = "0.1.0"

__all__ = [
    "client",
    "cppfilter",
    "exceptions",
    "fs_utils",
    "html_preset_export",
    "mod",
    "std_utils",
    "steam_utils",
    "string_utils",
    "vdf",
]