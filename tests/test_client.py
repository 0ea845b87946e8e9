import pytest

from dzlauncher.client import Client
from dzlauncher.exceptions import LauncherFileNotFoundError

ARGUMENTS = "some random arguments"


class Recorder:
    def __init__(self):
        self.calls = []

    def __call__(self, command, working_directory=""):
        self.calls.append((command, str(working_directory)))


@pytest.fixture
def base(tmp_path, monkeypatch):
    root = tmp_path.resolve()
    home = root / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("LD_PRELOAD", raising=False)
    return root


def make_game(directory, executable):
    directory.mkdir(parents=True, exist_ok=True)
    (directory / executable).write_text("")
    return directory


def make_mod(directory, name=None):
    (directory / "addons").mkdir(parents=True)
    if name is not None:
        (directory / "mod.cpp").write_text(f'name = "{name}";\n')
    return directory


def windows(path, drive="C"):
    return drive + ":" + str(path).replace("/", "\\")


def test_constructor_linux_executable(base):
    game = make_game(base / "dayz_path", "arma3.x86_64")
    client = Client(game, base / "workshop_path")
    assert client.executable_path == game / "arma3.x86_64"
    assert client.is_proton() is False


def test_constructor_proton_executable(base):
    game = make_game(base / "dayz_path", "DayZ_x64.exe")
    client = Client(game, base / "workshop_path")
    assert client.executable_path == game / "DayZ_x64.exe"
    assert client.is_proton() is True


def test_constructor_without_executable(base):
    (base / "dayz_path").mkdir()
    with pytest.raises(LauncherFileNotFoundError):
        Client(base / "dayz_path", base / "workshop_path")


def test_home_mods_empty(base):
    game = make_game(base / "dayz_path", "arma3.x86_64")
    assert Client(game, base / "workshop_path").home_mods() == []


def test_home_mods_only_excluded(base):
    game = make_game(base / "dayz_path", "arma3.x86_64")
    make_mod(game / "Addons")
    make_mod(game / "Expansion")
    assert Client(game, base / "workshop_path").home_mods() == []


def test_home_mods_two_valid(base):
    game = make_game(base / "dayz_path", "arma3.x86_64")
    make_mod(game / "Addons")
    make_mod(game / "Expansion")
    make_mod(game / "@othermod")
    make_mod(game / "@Remove_stamina")
    (game / "not_a_mod").mkdir()
    mods = Client(game, base / "workshop_path").home_mods()
    assert [mod.path for mod in mods] == [game / "@othermod", game / "@Remove_stamina"]


def test_home_mods_sorted_by_name(base):
    game = make_game(base / "dayz_path", "arma3.x86_64")
    make_mod(game / "@a", "Beta")
    make_mod(game / "@b", "Alpha")
    mods = Client(game, base / "workshop_path").home_mods()
    assert [mod.name() for mod in mods] == ["Alpha", "Beta"]


def test_workshop_mods_empty(base):
    game = make_game(base / "dayz_path", "arma3.x86_64")
    (base / "workshop_path").mkdir()
    assert Client(game, base / "workshop_path").workshop_mods() == []


def test_workshop_mods_useless_directories(base):
    game = make_game(base / "dayz_path", "arma3.x86_64")
    workshop = base / "workshop_path"
    for name in ("123", "456"):
        (workshop / name).mkdir(parents=True)
        (workshop / name / "useless.bin").write_text("")
    assert Client(game, workshop).workshop_mods() == []


def test_workshop_mods_two_mods(base):
    game = make_game(base / "dayz_path", "arma3.x86_64")
    workshop = base / "workshop_path"
    make_mod(workshop / "123")
    make_mod(workshop / "456")
    mods = Client(game, workshop).workshop_mods()
    assert [mod.path for mod in mods] == [workshop / "123", workshop / "456"]


@pytest.fixture
def cfg_setup(base):
    game = make_game(base / "dayz_path", "arma3.x86_64")
    workshop = base / "workshop_path"
    make_mod(workshop / "123", "Remove Stamina")
    make_mod(workshop / "456", "Big Mod")
    mod_part = (
        "class ModLauncherList\n{\n"
        "    class Mod1\n    {\n"
        '        dir="123";\n        name="Remove Stamina";\n        origin="GAME DIR";\n'
        f'        fullPath="{windows(workshop / "123")}";\n    }};\n'
        "    class Mod2\n    {\n"
        '        dir="456";\n        name="Big Mod";\n        origin="GAME DIR";\n'
        f'        fullPath="{windows(workshop / "456")}";\n    }};\n'
        "};\n"
    )
    return Client(game, workshop), [workshop / "123", workshop / "456"], mod_part


def test_create_cfg_parent_exists(base, cfg_setup):
    client, mods, mod_part = cfg_setup
    (base / "random").mkdir()
    cfg = base / "random" / "config.cfg"
    client.create_cfg(mods, cfg)
    assert cfg.read_text() == mod_part


def test_create_cfg_parent_missing(base, cfg_setup):
    client, mods, mod_part = cfg_setup
    cfg = base / "random" / "config.cfg"
    client.create_cfg(mods, cfg)
    assert cfg.read_text() == mod_part


def test_create_cfg_keeps_entries(base, cfg_setup):
    client, mods, mod_part = cfg_setup
    entries = 'setting="one";\nsomeInt=5;\n'
    cfg = base / "config.cfg"
    cfg.write_text(entries)
    client.create_cfg(mods, cfg)
    assert cfg.read_text() == entries + mod_part


def test_create_cfg_replaces_old_mod_list(base, cfg_setup):
    client, mods, mod_part = cfg_setup
    entries = 'setting="one";\n'
    old = 'class ModLauncherList\n{\n    class Mod1\n    {\n        dir="old";\n    };\n};\n'
    cfg = base / "config.cfg"
    cfg.write_text(entries + old)
    client.create_cfg(mods, cfg)
    assert cfg.read_text() == entries + mod_part


def test_create_cfg_default_proton_path(base):
    game = make_game(base / "steam" / "steamapps" / "common" / "DayZ", "DayZ_x64.exe")
    workshop = base / "workshop_path"
    make_mod(workshop / "123", "Remove Stamina")
    Client(game, workshop).create_cfg([workshop / "123"])
    cfg = (
        base / "steam" / "steamapps" / "compatdata" / "221100" / "pfx" / "drive_c" / "users"
        / "steamuser" / "My Documents" / "DayZ" / "DayZ.cfg"
    )
    text = cfg.read_text()
    assert f'fullPath="{windows(workshop / "123", "Z")}";' in text
    assert text.startswith("class ModLauncherList\n{\n    class Mod1\n")


@pytest.mark.parametrize("disable_esync", [False, True])
def test_start_direct_linux_no_env(base, disable_esync):
    game = make_game(base / "dayz_path", "arma3.x86_64")
    recorder = Recorder()
    Client(game, base / "workshop_path", run_command=recorder).start(
        ARGUMENTS, "", True, disable_esync
    )
    assert recorder.calls == [(f'env  "{game / "arma3.x86_64"}" {ARGUMENTS}', str(game))]


def test_start_direct_linux_user_env(base):
    game = make_game(base / "dayz_path", "arma3.x86_64")
    recorder = Recorder()
    Client(game, base / "workshop_path", run_command=recorder).start(
        ARGUMENTS, "SOME_NICE_ENV_VAR=1", True, False
    )
    expected = f'env SOME_NICE_ENV_VAR=1 "{game / "arma3.x86_64"}" {ARGUMENTS}'
    assert recorder.calls == [(expected, str(game))]


@pytest.fixture
def proton_steam(base):
    steam = base / "home" / ".steam" / "steam"
    (steam / "config").mkdir(parents=True)
    (steam / "config" / "config.vdf").write_text(
        '"InstallConfigStore"\n{\n "Software"\n {\n  "Valve"\n  {\n   "Steam"\n   {\n'
        '    "CompatToolMapping"\n    {\n     "221100"\n     {\n'
        '      "name" "proton_316"\n     }\n    }\n   }\n  }\n }\n}\n'
    )
    tool = steam / "compatibilitytools.d" / "proton_316"
    tool.mkdir(parents=True)
    (tool / "toolmanifest.vdf").write_text('"manifest"\n{\n "commandline" "/proton run"\n}\n')
    game = make_game(steam / "steamapps" / "common" / "DayZ", "DayZ_x64.exe")
    return steam, game


def _proton_command(steam, game, esync, ld_preload):
    return (
        f"env {esync} SteamGameId=221100 LD_PRELOAD={ld_preload} "
        f'STEAM_COMPAT_DATA_PATH="{steam}/steamapps/compatdata/221100"   '
        f'"{steam}/compatibilitytools.d/proton_316/proton" run '
        f'"{game}/DayZ_x64.exe" {ARGUMENTS}'
    )


def test_start_direct_proton(base, proton_steam):
    steam, game = proton_steam
    recorder = Recorder()
    Client(game, base / "workshop_path", run_command=recorder).start(ARGUMENTS, "", True, False)
    ld_preload = f"{steam}/ubuntu12_64/gameoverlayrenderer.so"
    assert recorder.calls == [(_proton_command(steam, game, "", ld_preload), str(game))]


def test_start_direct_proton_keeps_ld_preload(base, proton_steam, monkeypatch):
    steam, game = proton_steam
    monkeypatch.setenv("LD_PRELOAD", "somelib.so")
    recorder = Recorder()
    Client(game, base / "workshop_path", run_command=recorder).start(ARGUMENTS, "", True, False)
    ld_preload = f"{steam}/ubuntu12_64/gameoverlayrenderer.so:somelib.so"
    assert recorder.calls == [(_proton_command(steam, game, "", ld_preload), str(game))]


def test_start_direct_proton_esync_disabled(base, proton_steam):
    steam, game = proton_steam
    recorder = Recorder()
    Client(game, base / "workshop_path", run_command=recorder).start(ARGUMENTS, "", True, True)
    ld_preload = f"{steam}/ubuntu12_64/gameoverlayrenderer.so"
    expected = _proton_command(steam, game, "PROTON_NO_ESYNC=1", ld_preload)
    assert recorder.calls == [(expected, str(game))]


def test_start_direct_proton_without_steam_runs_nothing(base):
    game = make_game(base / "dayz_path", "DayZ_x64.exe")
    recorder = Recorder()
    Client(game, base / "workshop_path", run_command=recorder).start(ARGUMENTS, "", True, False)
    assert recorder.calls == []


@pytest.mark.parametrize("disable_esync", [False, True])
def test_start_indirect_linux(base, disable_esync):
    game = make_game(base / "dayz_path", "arma3.x86_64")
    recorder = Recorder()
    Client(game, base / "workshop_path", run_command=recorder).start(
        ARGUMENTS, "", False, disable_esync
    )
    assert recorder.calls == [(f"env  steam -applaunch 221100 {ARGUMENTS}", "")]


def test_start_indirect_proton(base):
    game = make_game(base / "dayz_path", "DayZ_x64.exe")
    recorder = Recorder()
    Client(game, base / "workshop_path", run_command=recorder).start(ARGUMENTS, "", False, False)
    assert recorder.calls == [(f"env   steam -applaunch 221100 -nolauncher {ARGUMENTS}", "")]


def test_start_indirect_proton_esync_disabled(base):
    game = make_game(base / "dayz_path", "DayZ_x64.exe")
    recorder = Recorder()
    Client(game, base / "workshop_path", run_command=recorder).start(ARGUMENTS, "", False, True)
    expected = f"env PROTON_NO_ESYNC=1  steam -applaunch 221100 -nolauncher {ARGUMENTS}"
    assert recorder.calls == [(expected, "")]


@pytest.fixture
def flatpak_steam(base):
    steam = base / "home" / ".var" / "app" / "com.valvesoftware.Steam" / ".steam" / "steam"
    (steam / "config").mkdir(parents=True)
    (steam / "config" / "config.vdf").write_text('"InstallConfigStore"\n{\n}\n')
    return steam


def test_start_indirect_flatpak_proton(base, flatpak_steam):
    game = make_game(base / "dayz_path", "DayZ_x64.exe")
    recorder = Recorder()
    Client(game, base / "workshop_path", run_command=recorder).start(ARGUMENTS, "A=1", False, True)
    expected = (
        'flatpak run --env="PROTON_NO_ESYNC=1 A=1" com.valvesoftware.Steam '
        f"-applaunch 221100 -nolauncher {ARGUMENTS}"
    )
    assert recorder.calls == [(expected, "")]


def test_start_indirect_flatpak_native(base, flatpak_steam):
    game = make_game(base / "dayz_path", "arma3.x86_64")
    recorder = Recorder()
    Client(game, base / "workshop_path", run_command=recorder).start(ARGUMENTS, "", False, False)
    expected = f"flatpak run com.valvesoftware.Steam -applaunch 221100 -nolauncher {ARGUMENTS}"
    assert recorder.calls == [(expected, "")]