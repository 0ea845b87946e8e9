"""Process, file and environment helpers."""

import errno
import glob
import logging
import os
import subprocess
import sys
from pathlib import Path

from .string_utils import split, trim

logger = logging.getLogger(__name__)

_WINE_PRELOADER = "wine64-preloader"
_DEFAULT_LIBRARY_DIRS = (
    "/lib",
    "/usr/lib",
    "/lib64",
    "/usr/lib64",
    "/lib32",
    "/usr/lib32",
    "/lib/x86_64-linux-gnu",
    "/usr/lib/x86_64-linux-gnu",
    "/lib/i386-linux-gnu",
    "/usr/lib/i386-linux-gnu",
    "/usr/local/lib",
)


def create_file(path):
    """Create ``path`` if missing (mode 0644); return whether it could be opened."""
    try:
        descriptor = os.open(path, os.O_CREAT | os.O_WRONLY, 0o644)
    except OSError:
        return False
    os.close(descriptor)
    return True


def execute_command(command):
    """Run ``command`` through the shell and return ``(exit_code, stdout)``."""
    result = subprocess.run(
        command,
        shell=True,
        stdout=subprocess.PIPE,
        text=True,
        errors="replace",
        check=False,
    )
    return result.returncode, result.stdout


def read_text(path):
    """Return the contents of ``path``, or an empty string if it cannot be read."""
    try:
        with open(path, encoding="utf-8", errors="replace", newline="") as handle:
            return handle.read()
    except OSError:
        return ""


def write_text(path, text):
    """Write ``text`` to ``path``; the parent directory must already exist."""
    parent = Path(path).parent
    if not parent.exists():
        raise FileNotFoundError(errno.ENOENT, "Parent dir does not exist", str(parent))
    with open(path, "w", encoding="utf-8", newline="") as handle:
        handle.write(text)


def find_process(name, case_insensitive=False):
    """Return the PID of a running process called ``name``, or None."""
    if sys.platform.startswith("linux"):
        return _find_process_in_proc(name, case_insensitive)
    return _find_process_with_ps(name, case_insensitive)


def _find_process_in_proc(name, case_insensitive):
    def normalise(text):
        return text.lower() if case_insensitive else text

    wanted = normalise(name)
    for entry in Path("/proc").iterdir():
        try:
            exe = entry / "exe"
            if entry.is_symlink() or not entry.is_dir() or not exe.exists():
                continue
            exe_name = Path(os.readlink(exe)).name
            if normalise(exe_name) == wanted:
                return int(entry.name)
            if exe_name == _WINE_PRELOADER and trim(normalise(read_text(entry / "comm"))) == wanted:
                return int(entry.name)
        except OSError:
            # usually access denied to other users' processes
            continue
    return None


def _find_process_with_ps(name, case_insensitive):
    exit_code, output = execute_command("ps -eo pid=,ucomm=")
    if exit_code != 0:
        return None

    wanted = name[:-4] if name.endswith(".app") else name
    if case_insensitive:
        wanted = wanted.lower()

    for line in split(output, "\n"):
        trimmed = trim(line)
        pid, separator, process_name = trimmed.partition(" ")
        if not separator:
            logger.warning('Didnt find space in line "%s" from ps output', trimmed)
            continue
        if case_insensitive:
            process_name = process_name.lower()
        if process_name == wanted:
            return int(pid)
    return None


def start_background_process(command, working_directory=""):
    """Start ``command`` detached in the background from ``working_directory``."""
    directory = os.fspath(working_directory)
    subprocess.run(["bash", "-c", f'cd "{directory}"; {command} <&- &'], check=False)


def config_file_path(config_filename):
    """Return where the launcher keeps ``config_filename``, honouring XDG_CONFIG_HOME."""
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home is not None:
        config_directory = Path(f"{xdg_config_home}/dayzunixlauncher")
    else:
        config_directory = Path(f"{os.environ.get('HOME', '')}/.config/dayzunixlauncher")
    return config_directory / config_filename


def _ld_so_conf_dirs(conf, seen):
    conf = Path(conf)
    if conf in seen:
        return
    seen.add(conf)
    for raw_line in read_text(conf).splitlines():
        line = raw_line.split("#", 1)[0].strip()
        if not line:
            continue
        if line.startswith("include"):
            pattern = line[len("include"):].strip()
            if not os.path.isabs(pattern):
                pattern = str(conf.parent / pattern)
            for included in sorted(glob.glob(pattern)):
                yield from _ld_so_conf_dirs(included, seen)
        else:
            yield line


def _library_dirs():
    yield from (entry for entry in os.environ.get("LD_LIBRARY_PATH", "").split(":") if entry)
    yield from _ld_so_conf_dirs("/etc/ld.so.conf", set())
    yield from _DEFAULT_LIBRARY_DIRS


def is_library_available(library_filename):
    """Return whether the dynamic loader can find ``library_filename``."""
    name = os.fspath(library_filename)
    if not name:
        return False
    if "/" in name:
        return os.path.isfile(name)
    return any(os.path.isfile(os.path.join(directory, name)) for directory in _library_dirs())