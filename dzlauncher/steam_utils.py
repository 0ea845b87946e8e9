"""Discovery of the Steam installation, its libraries and compatibility tools."""

import logging
import os
import re
from pathlib import Path

from .exceptions import (
    DirectoryNotFoundError,
    LauncherError,
    SteamInstallNotFoundError,
    SteamWorkshopDirectoryNotFoundError,
)
from .std_utils import read_text
from .string_utils import replace, trim
from .vdf import Vdf

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_PATHS = (
    "$HOME/.steam/steam",
    "$HOME/.local/share/Steam",
    "$HOME/.var/app/com.valvesoftware.Steam/.steam/steam",
    "$HOME/.var/app/com.valvesoftware.Steam/.local/share/Steam",
    "$HOME/Library/Application Support/Steam",
)

CONFIG_PATH = Path("config/config.vdf")
LIBRARY_FOLDERS_PATH = Path("config/libraryfolders.vdf")
SYSTEM_COMPATIBILITY_TOOLS_DIR = Path("/usr/share/steam/compatibilitytools.d")

_FLATPAK_ID = "com.valvesoftware.Steam"
_COMMANDLINE_KEY = "manifest/commandline"
_APP_ID_END = re.compile(r"[\r\n\[]")


def _load_vdf(path):
    vdf = Vdf()
    vdf.load_from_text(read_text(path))
    return vdf


class SteamUtils:
    """A located Steam installation."""

    def __init__(self, search_paths=DEFAULT_SEARCH_PATHS):
        home = os.environ.get("HOME", "")
        self.steam_path = None
        for search_path in search_paths:
            candidate = Path(replace(os.fspath(search_path), "$HOME", home))
            if (candidate / CONFIG_PATH).exists():
                self.steam_path = candidate.resolve(strict=True)
                break
        logger.info("Steam path: %s", self.steam_path if self.steam_path is not None else "")
        if self.steam_path is None:
            raise SteamInstallNotFoundError()

    def install_paths(self):
        """Return the main Steam directory followed by every extra library folder."""
        paths = [self.steam_path]
        library_folders = _load_vdf(self.steam_path / LIBRARY_FOLDERS_PATH)
        for value in library_folders.values_with_filter("path"):
            logger.info("Install path: %s", value)
            paths.append(Path(value))
        return paths

    def game_path_from_install_path(self, install_path, appid):
        """Return where app ``appid`` is installed inside library ``install_path``.

        Raises KeyError when the app manifest lacks an install directory.
        """
        install_path = Path(install_path)
        manifest = _load_vdf(install_path / "steamapps" / f"appmanifest_{appid}.acf")
        try:
            install_dir = manifest.key_values["AppState/installdir"]
        except KeyError:
            raise KeyError(f"no install directory for appid {appid} in {install_path}") from None
        return install_path / "steamapps/common" / install_dir

    def workshop_path(self, install_path, appid):
        """Return the Workshop content directory of ``appid`` in ``install_path``."""
        proposed = Path(install_path) / "steamapps/workshop/content" / str(appid)
        if proposed.exists():
            return proposed
        raise SteamWorkshopDirectoryNotFoundError(appid)

    def compatibility_tool_for_app_id(self, app_id):
        """Return ``(tool_executable, tool_arguments)`` of the tool mapped to ``app_id``."""
        config = _load_vdf(self.steam_path / CONFIG_PATH)
        pattern = f"CompatToolMapping/{app_id}/name"
        logger.debug("filtering by '%s'", pattern)
        values = config.values_with_filter(pattern)
        for value in values:
            logger.debug("found: %s", value)
        if not values:
            raise LauncherError("compatibility tool entry not found")

        tool_dir = self._compatibility_tool_path(values[0])
        manifest_path = tool_dir / "toolmanifest.vdf"
        manifest = _load_vdf(manifest_path)
        commandline = manifest.key_values.get(_COMMANDLINE_KEY)
        if commandline is None:
            raise LauncherError(f"cannot read '{_COMMANDLINE_KEY}' from '{manifest_path}'")

        separator = commandline.find(" ")
        if separator == -1:
            raise LauncherError(f"malformed '{_COMMANDLINE_KEY}' in '{manifest_path}'")
        tool_arguments = trim(commandline[separator:])
        tool_path = trim(commandline[:separator])
        return Path(f"{tool_dir}{tool_path}"), tool_arguments

    def install_path_from_game_path(self, game_path):
        """Return the Steam library holding ``game_path`` (three levels up)."""
        return Path(os.path.realpath(Path(game_path) / "../../.."))

    def is_flatpak(self):
        """Return whether Steam is the Flatpak build."""
        return _FLATPAK_ID in self.steam_path.parts

    def _compatibility_tool_path(self, shortname):
        try:
            return self._user_compatibility_tool(shortname)
        except DirectoryNotFoundError:
            logger.debug("failed to find user compatibility tool '%s'", shortname)

        log_content = read_text(self.steam_path / "logs/compat_log.txt")
        marker = f"Registering tool {shortname}, AppID "
        position = log_content.rfind(marker)
        if position == -1:
            raise LauncherError(f"cannot find entry for '{shortname}' compatibility tool")

        app_id_start = position + len(marker)
        end_match = _APP_ID_END.search(log_content, app_id_start)
        app_id_end = end_match.start() if end_match else len(log_content)
        return self._builtin_compatibility_tool(shortname, log_content[app_id_start:app_id_end])

    def _user_compatibility_tool(self, shortname):
        steam_tool = self.steam_path / "compatibilitytools.d" / shortname
        logger.debug("trying '%s'", steam_tool)
        if steam_tool.exists():
            return steam_tool

        system_tool = SYSTEM_COMPATIBILITY_TOOLS_DIR / shortname
        logger.debug("trying '%s'", system_tool)
        if system_tool.exists():
            return system_tool

        raise DirectoryNotFoundError(steam_tool)

    def _builtin_compatibility_tool(self, shortname, app_id):
        for install_path in self.install_paths():
            try:
                return self.game_path_from_install_path(install_path, app_id)
            except (LauncherError, KeyError, OSError):
                continue
        raise LauncherError(
            f"cannot find tool with appid '{app_id}', name '{shortname}'. Is it installed in Steam?"
        )