"""The game installation: its mods, its config file and how to start it."""

import logging
import os
import sys
from pathlib import Path

from .cppfilter import remove_class
from .exceptions import LauncherError, LauncherFileNotFoundError
from .fs_utils import list_dir
from .mod import Mod
from .std_utils import (
    create_file,
    is_library_available,
    read_text,
    start_background_process,
    write_text,
)
from .steam_utils import SteamUtils
from .string_utils import replace, to_windows_path, trim

logger = logging.getLogger(__name__)

APP_ID = "221100"

EXCLUSIONS = frozenset({
    "Addons", "AoW", "Argo", "BattlEye", "Contact", "Curator", "Dll", "Dta", "Enoch",
    "Expansion", "fontconfig", "GM", "CSLA", "Heli", "Jets", "Kart", "Keys", "Launcher",
    "MPMissions", "Mark", "Missions", "Orange", "Tacops", "Tank", "vn", "WS", "legal",
    "steam_shader_cache",
})

IS_LINUX = sys.platform.startswith("linux")

if IS_LINUX:
    EXECUTABLE_NAMES = ("arma3.x86_64", "DayZ_x64.exe", "DayZ_BE.exe")
    LOCAL_SHARE_PREFIX = ".local/share"
    BOHEMIA_INTERACTIVE_PREFIX = "bohemiainteractive/dayz"
else:
    EXECUTABLE_NAMES = ("ArmA3.app",)
    LOCAL_SHARE_PREFIX = "Library/Application Support"
    BOHEMIA_INTERACTIVE_PREFIX = "com.vpltd.Arma3"

GAME_CONFIG_PATH = "GameDocuments/DayZ/DayZ.cfg"
FLATPAK_PREFIX = ".var/app/com.valvesoftware.Steam"
PROTON_CONFIG_RELATIVE_PATH = (
    "../../compatdata/221100/pfx/drive_c/users/steamuser/My Documents/DayZ/DayZ.cfg"
)
PROTON_EXECUTABLE = "DayZ_x64.exe"
MOD_LIST_CLASS = "class ModLauncherList"

_MOD_TEMPLATE = """    class Mod{index}
    {{
        dir="{dir}";
        name="{name}";
        origin="GAME DIR";
        fullPath="{full_path}";
    }};
"""

_LAUNCH_ERRORS = (LauncherError, OSError, KeyError, ValueError)


def _esync_prefix(disable_esync):
    return "PROTON_NO_ESYNC=1" if disable_esync else ""


def _optional_steam_runtime(steam_utils):
    if is_library_available("libpng12.so"):
        return ""
    runtime = steam_utils.steam_path / "ubuntu12_32/steam-runtime/run.sh"
    if runtime.exists():
        return str(runtime)
    logger.critical(
        "Did not find %s and libpng12.so is missing. Thermal optics will be broken!", runtime
    )
    return ""


def _verb(arguments):
    return replace(arguments, "%verb%", "run")


class Client:
    """A game installation directory together with its Workshop directory."""

    def __init__(self, arma_path, target_workshop_path, *, run_command=start_background_process):
        self.path = Path(arma_path)
        self.executable_path = next(
            (self.path / name for name in EXECUTABLE_NAMES if (self.path / name).exists()),
            None,
        )
        if self.executable_path is None:
            raise LauncherFileNotFoundError("")
        self.workshop_path = Path(target_workshop_path)
        self._run_command = run_command

    def create_cfg(self, mod_paths, cfg_path=None):
        """Rewrite the mod list class of the game config to hold ``mod_paths``."""
        cfg = Path(cfg_path) if cfg_path else self._cfg_path()
        if not cfg.exists():
            if not cfg.parent.exists():
                cfg.parent.mkdir(parents=True, exist_ok=True)
            create_file(cfg)

        config = remove_class(read_text(cfg), MOD_LIST_CLASS)
        config += f"{MOD_LIST_CLASS}\n{{\n"
        config += "".join(
            self._cfg_entry_for_mod(mod_path, index)
            for index, mod_path in enumerate(mod_paths, start=1)
        )
        config += "};\n"

        logger.debug("Writing config to '%s':\n%s", cfg, config)
        write_text(cfg, config)

    def is_proton(self):
        """Return whether the Windows build is installed (run through Proton)."""
        return self.executable_path.name == PROTON_EXECUTABLE

    def start(self, arguments, user_environment_variables, launch_directly=False,
              disable_esync=False):
        """Start the game with ``arguments`` in the background."""
        logger.debug(
            "start: arguments '%s', environment '%s', launch_directly %s, disable_esync %s",
            arguments, user_environment_variables, launch_directly, disable_esync,
        )
        if IS_LINUX:
            if launch_directly:
                self._direct_launch(arguments, user_environment_variables, disable_esync)
            else:
                self._indirect_launch(arguments, user_environment_variables, disable_esync)
        elif launch_directly:
            self._direct_launch_mac(arguments, user_environment_variables)
        else:
            command = (
                f"env {user_environment_variables} open steam://run/{APP_ID}//"
                + replace(arguments, " ", "%20")
            )
            self._run_command(command)

    def home_mods(self):
        """Return the mods found in the game directory."""
        return self._mods_from_directory(self.path)

    def workshop_mods(self):
        """Return the mods found in the Workshop directory."""
        return self._mods_from_directory(self.workshop_path)

    def _direct_launch(self, arguments, user_environment_variables, disable_esync):
        if not self.is_proton():
            self._run_command(
                f'env {user_environment_variables} "{self.executable_path}" {arguments}',
                str(self.path),
            )
            return

        try:
            steam_utils = SteamUtils()
            tool_path, tool_arguments = steam_utils.compatibility_tool_for_app_id(int(APP_ID))

            ld_preload = f"{steam_utils.steam_path}/ubuntu12_64/gameoverlayrenderer.so"
            old_ld_preload = os.environ.get("LD_PRELOAD")
            if old_ld_preload:
                ld_preload = f"{ld_preload}:{old_ld_preload}"

            compat_data = (
                steam_utils.install_path_from_game_path(self.path) / "steamapps/compatdata" / APP_ID
            )
            environment = (
                f"{_esync_prefix(disable_esync)} SteamGameId={int(APP_ID)} "
                f'LD_PRELOAD={ld_preload} STEAM_COMPAT_DATA_PATH="{compat_data}"'
            )
            command = (
                f"env {environment} {user_environment_variables} "
                f"{_optional_steam_runtime(steam_utils)} \"{tool_path}\" "
                f'{_verb(tool_arguments)} "{self.executable_path}" {arguments}'
            )
            logger.info("Running DayZ:\n%s\n", command)
            self._run_command(command, str(self.path))
        except _LAUNCH_ERRORS as error:
            logger.critical("Direct launch failed, exception: %s", error)

    def _indirect_launch(self, arguments, user_environment_variables, disable_esync):
        proton = self.is_proton()
        if self._is_flatpak():
            if proton:
                command = (
                    f'flatpak run --env="{_esync_prefix(disable_esync)} '
                    f'{user_environment_variables}" com.valvesoftware.Steam '
                    f"-applaunch {APP_ID} -nolauncher {arguments}"
                )
            else:
                command = (
                    f"flatpak run com.valvesoftware.Steam -applaunch {APP_ID} "
                    f"-nolauncher {arguments}"
                )
        elif proton:
            command = (
                f"env {_esync_prefix(disable_esync)} {user_environment_variables} "
                f"steam -applaunch {APP_ID} -nolauncher {arguments}"
            )
        else:
            command = f"env {user_environment_variables} steam -applaunch {APP_ID} {arguments}"
        self._run_command(command)

    def _direct_launch_mac(self, arguments, user_environment_variables):
        try:
            steam_utils = SteamUtils()
            ld_preload = (
                f"{steam_utils.steam_path}/Steam.AppBundle/Steam/Contents/MacOS/"
                "gameoverlayrenderer.dylib"
            )
            old_ld_preload = os.environ.get("DYLD_INSERT_LIBRARIES")
            if old_ld_preload:
                ld_preload += f"{ld_preload}:{old_ld_preload}"
            environment = f'DYLD_INSERT_LIBRARIES="{ld_preload}"'
            command = (
                f"env {environment} {user_environment_variables} "
                f'"{self.executable_path}/Contents/MacOS/ArmA3" {arguments}'
            )
            logger.info("Running game:\n%s", command)
            self._run_command(command, str(self.path))
        except _LAUNCH_ERRORS as error:
            logger.critical("Direct launch failed, exception: %s", error)

    def _is_flatpak(self):
        if not IS_LINUX:
            return False
        try:
            return SteamUtils().is_flatpak()
        except (LauncherError, OSError) as error:
            logger.warning("Exception trying to determine if Flatpak, exception text: %s", error)
            return False

    def _cfg_path(self):
        if self.is_proton():
            return self.path / PROTON_CONFIG_RELATIVE_PATH
        home = Path(os.environ.get("HOME", ""))
        if self._is_flatpak():
            home = home / FLATPAK_PREFIX
        return home / LOCAL_SHARE_PREFIX / BOHEMIA_INTERACTIVE_PREFIX / GAME_CONFIG_PATH

    def _fake_drive_letter(self):
        return "Z" if self.is_proton() else "C"

    def _cfg_entry_for_mod(self, mod_path, index):
        mod = Mod(mod_path)
        absolute = trim(str(mod.path), '"')
        full_path = to_windows_path(absolute, self._fake_drive_letter())
        dir_name = trim(Path(absolute).name, '"')
        name = mod.lookup(dir_name, "name", "dir", "tooltip", default="name_read_failed")
        name = replace(name, '"', "_")
        return _MOD_TEMPLATE.format(index=index, dir=dir_name, name=name, full_path=full_path)

    def _mods_from_directory(self, directory):
        directory = Path(directory)
        mods = []
        for entry in list_dir(directory):
            if entry in EXCLUSIONS:
                continue
            mod_dir = directory / entry
            if not mod_dir.is_dir():
                continue
            if "addons" not in list_dir(mod_dir, True):
                continue
            mods.append(Mod(mod_dir))

        mods.sort(key=lambda mod: mod.lookup("name", "dir", default=str(mod.path).lower()))
        return mods