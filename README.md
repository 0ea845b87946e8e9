# dzlauncher

A library for running DayZ with mods on Linux (native Steam, Flatpak Steam
or Proton) and macOS.

It finds your Steam installation, reads Steam's VDF files, discovers mods in
the game directory and in the Steam Workshop, writes the mod list into the
game's `DayZ.cfg`, exports mod lists as HTML presets and starts the game
either directly or through Steam.

It uses only the standard library and needs Python 3.10 or newer.

## Modules

- `dzlauncher.steam_utils`: `SteamUtils` locates Steam (searching
  `DEFAULT_SEARCH_PATHS`, where `$HOME` is expanded) and offers
  `install_paths()`, `game_path_from_install_path(install_path, appid)`,
  `workshop_path(install_path, appid)`,
  `compatibility_tool_for_app_id(app_id)`,
  `install_path_from_game_path(game_path)` and `is_flatpak()`.
- `dzlauncher.vdf`: `Vdf` parses Steam's VDF text into the flat dict
  `key_values`, nested keys joined with `/`; `values_with_filter(pattern)`
  returns the values whose key contains `pattern`, in key order.
- `dzlauncher.mod`: `Mod` reads a mod directory (it must hold an `addons`
  subdirectory) and the `key = "value";` entries of its `.cpp` files.
  `name()`, `lookup(*keys, default=...)` and `is_workshop_mod(workshop_path)`
  query it; `parse_mod_cpp(text)` parses such text on its own.
- `dzlauncher.cppfilter`: `remove_class(text, class_name)` cuts every block
  beginning with `class_name` (for example `"class ModLauncherList"`) out of
  config text.
- `dzlauncher.client`: `Client(game_path, workshop_path)` lists mods with
  `home_mods()` and `workshop_mods()`, rewrites the mod list in the game config
  with `create_cfg(mod_paths, cfg_path)` and starts the game with
  `start(arguments, user_environment_variables, launch_directly, disable_esync)`.
  The keyword argument `run_command` replaces the function used to start the
  shell command (by default `std_utils.start_background_process`).
- `dzlauncher.html_preset_export`: `export_mods(preset_name, mods,
  workshop_path)` renders an HTML preset; Workshop mods link to their Steam
  Workshop page, local mods to their `url` or `action` value.
- `dzlauncher.string_utils`, `dzlauncher.fs_utils`, `dzlauncher.std_utils`:
  text, filesystem and process helpers, among them `find_process(name)`,
  `start_background_process(command, working_directory)` and
  `config_file_path(filename)`, which honours `XDG_CONFIG_HOME`.
- `dzlauncher.exceptions`: the errors the package raises, all derived from
  `LauncherError`.

## Example

```python
from pathlib import Path

from dzlauncher.client import Client
from dzlauncher.html_preset_export import export_mods
from dzlauncher.steam_utils import SteamUtils

steam = SteamUtils()
install = steam.install_paths()[0]
game = steam.game_path_from_install_path(install, "221100")
workshop = steam.workshop_path(install, "221100")

client = Client(game, workshop)
mods = client.workshop_mods() + client.home_mods()
for mod in mods:
    print(mod.name(), mod.path)

client.create_cfg([mod.path for mod in mods], None)
client.start("-nosplash", "", False, False)

Path("preset.html").write_text(export_mods("my preset", mods, workshop))
```

With `cfg_path` set to `None` the config location is worked out from the
installation: inside the Proton prefix for the Windows build, otherwise below
`$HOME` (within the Flatpak data directory when Steam is the Flatpak build).

## Parsing Steam files

```python
from dzlauncher.vdf import Vdf

vdf = Vdf()
vdf.load_from_text('"Branch"{"Key" "Value"}', False)
print(vdf.key_values)                 # {'Branch/Key': 'Value'}
print(vdf.values_with_filter("Key"))  # ['Value']
```

## Errors

- `SteamInstallNotFoundError`: no Steam installation was found.
- `SteamWorkshopDirectoryNotFoundError`: the Workshop directory of an app is
  missing.
- `LauncherFileNotFoundError`: the game directory holds no known executable.
- `DirectoryNotFoundError`: a mod directory has no `addons` subdirectory.
- `SyntaxErrorException`: malformed VDF or config text.
- `LauncherError`: base class of all of them, also raised when no
  compatibility tool can be found for an app.

`game_path_from_install_path` raises `KeyError` when an app manifest names no
install directory. Failures while launching directly are logged, not raised.

## What it does not do

This is a library only: it has no command-line program and no graphical
interface, and it does not store settings of its own — `config_file_path`
only tells where such a file would live. It does not download or update mods;
it works with what Steam has already installed.