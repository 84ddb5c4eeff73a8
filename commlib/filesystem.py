"""File, directory, path and INI helpers."""

from __future__ import annotations

import logging
import os
import re
from typing import AnyStr

logger = logging.getLogger(__name__)

MAX_PATH = 260
_FILETIME_UNIX_OFFSET = 116444736000000000
_INT_PREFIX = re.compile(r"\s*([-+]?\d+)")


def _is_sep(char: str) -> bool:
    return char == os.sep or (os.altsep is not None and char == os.altsep)


def _rel(*parts: str) -> str:
    return os.sep.join(parts)


def _env(key: str) -> str:
    value = os.environ.get(key, "")
    if not value:
        raise KeyError(f"environment variable {key!r} is not set")
    return value


def _read_ini_text(path: str) -> str | None:
    try:
        with open(path, "rb") as handle:
            raw = handle.read()
    except OSError:
        return None
    if raw.startswith((b"\xff\xfe", b"\xfe\xff")):
        return raw.decode("utf-16", errors="replace")
    return raw.decode("utf-8-sig", errors="replace")


def _profile_lookup(path: str, section: str, key: str) -> str | None:
    """Return the first value of ``key`` in ``section``; names are case-insensitive."""
    text = _read_ini_text(path)
    if text is None:
        return None
    wanted_section = section.strip().lower()
    wanted_key = key.strip().lower()
    in_section = False
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith(";"):
            continue
        if stripped.startswith("["):
            close = stripped.find("]")
            name = stripped[1:close] if close > 0 else stripped[1:]
            in_section = name.strip().lower() == wanted_section
            continue
        if not in_section or "=" not in stripped:
            continue
        name, value = stripped.split("=", 1)
        if name.strip().lower() != wanted_key:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        return value
    return None


def _profile_string(path: str, section: str, key: str, default: str = "") -> str:
    value = _profile_lookup(path, section, key)
    if value is None:
        value = default
    return value[: MAX_PATH - 1]


def _profile_int(path: str, section: str, key: str, default: int) -> int:
    value = _profile_lookup(path, section, key)
    if value is None:
        return default
    match = _INT_PREFIX.match(value)
    return int(match.group(1)) if match else 0


def combine(path1: str, path2: str) -> str:
    """Join two path pieces; an empty piece gives an empty result.

    A separator is put in between unless ``path2`` already begins with one.
    """
    if not path1 or not path2:
        return ""
    if _is_sep(path2[0]):
        return path1 + path2
    return path1 + os.sep + path2


def get_parent(directory: str) -> str:
    """Return ``directory`` without its last component.

    One trailing separator is ignored; a path with no separator comes back as it is.
    """
    if not directory:
        raise ValueError("directory must not be empty")
    trimmed = directory[:-1] if _is_sep(directory[-1]) else directory
    positions = [trimmed.rfind(os.sep)]
    if os.altsep:
        positions.append(trimmed.rfind(os.altsep))
    last = max(positions)
    return trimmed if last < 0 else trimmed[:last]


def file_exists(path: str) -> bool:
    """Return True if ``path`` names an existing file or directory."""
    exists = os.path.exists(path)
    logger.debug("exists %s: %s", path, exists)
    return exists


def directory_exists(path: str) -> bool:
    """Return True if anything exists at ``path``."""
    return os.path.lexists(path)


def list_all(path: AnyStr, recursive: bool = False) -> list[AnyStr]:
    """List the files under ``path``; directories are entered only when ``recursive``.

    An unreadable directory yields an empty list.
    """
    sep = os.fsencode(os.sep) if isinstance(path, bytes) else os.sep
    try:
        with os.scandir(path) as iterator:
            entries = sorted(iterator, key=lambda entry: entry.name)
    except OSError as error:
        logger.error("cannot list %r: %s", path, error)
        return []
    files: list[AnyStr] = []
    for entry in entries:
        full = path + sep + entry.name
        if entry.is_dir(follow_symlinks=False):
            if recursive:
                files.extend(list_all(full, True))
        else:
            files.append(full)
    return files


def read_all(path: str) -> bytes:
    """Return the whole content of a file, or empty bytes if it cannot be opened."""
    try:
        with open(path, "rb") as handle:
            return handle.read()
    except OSError:
        return b""


def file_size(path: str) -> int:
    """Return the size of a file in bytes, or -1 if it cannot be opened."""
    try:
        with open(path, "rb") as handle:
            return os.fstat(handle.fileno()).st_size
    except OSError:
        return -1


def get_modified_time(path: str) -> int:
    """Return the last write time as 100-nanosecond ticks since 1601-01-01 UTC."""
    try:
        stat = os.stat(path)
    except OSError as error:
        logger.warning("cannot stat %s: %s", path, error)
        raise
    return stat.st_mtime_ns // 100 + _FILETIME_UNIX_OFFSET


def delete_directory(path: str) -> None:
    """Delete a directory and everything in it.

    Raises OSError if the directory cannot be listed; files that cannot be
    removed are logged and left behind.
    """
    with os.scandir(path) as iterator:
        entries = list(iterator)
    for entry in entries:
        full = path + os.sep + entry.name
        if entry.is_dir(follow_symlinks=False):
            try:
                delete_directory(full)
            except OSError as error:
                logger.error("cannot delete directory %s: %s", full, error)
        else:
            try:
                os.remove(full)
            except OSError as error:
                logger.error("cannot delete file %s: %s", full, error)
    try:
        os.rmdir(path)
    except OSError as error:
        logger.error("cannot remove %s: %s", path, error)


def safe_create(directory: str) -> bool:
    """Create ``directory`` and any missing parents; True if it exists afterwards."""
    try:
        os.mkdir(directory)
        return True
    except FileExistsError:
        return True
    except FileNotFoundError:
        parent = get_parent(directory) if directory else directory
        if parent and parent != directory and safe_create(parent):
            return safe_create(directory)
        return False
    except OSError:
        return False


def get_environment_variable(key: str) -> str:
    """Return an environment variable; raise KeyError if it is unset or empty."""
    try:
        value = _env(key)
    except KeyError:
        logger.error("environment variable %s not found", key)
        raise
    logger.debug("%s=%s", key, value)
    return value


def get_current_dir() -> str:
    """Return the current working directory."""
    return os.getcwd()


def get_all_users_dir() -> str:
    """Return the common application-data directory, or '' if it is unknown."""
    return os.environ.get("PROGRAMDATA", "")


def get_client_ini_path() -> str:
    """Return the path of the installer's client.ini, or ''."""
    path = get_all_users_dir()
    if not path:
        return ""
    return combine(path, _rel("Microsoft", "Installer", "client.ini"))


def get_redirect_all_users_dir() -> str:
    """Return the all-users directory, following a redirect set in client.ini."""
    ini_path = get_client_ini_path()
    if not ini_path:
        return get_all_users_dir()
    path = ""
    if _profile_int(ini_path, "Settings", "Redirect_Enabled", 0):
        redirect = _profile_string(ini_path, "Settings", "Redirect_Path")
        if redirect:
            path = combine(redirect, "All Users")
    return path or get_all_users_dir()


def _under(base: str, *parts: str) -> str:
    if not base:
        return ""
    return combine(base, _rel(*parts))


def get_dbgctr_path() -> str:
    """Return the DbgCtr directory under the (unredirected) all-users directory."""
    return _under(get_all_users_dir(), "Microsoft", "DbgCtr")


def get_help_clr_path() -> str:
    """Return the HelpClr directory under the redirected all-users directory."""
    return _under(get_redirect_all_users_dir(), "Microsoft", "HelpClr")


def get_app_history_path() -> str:
    """Return the App_History directory under the redirected all-users directory."""
    return _under(get_redirect_all_users_dir(), "Microsoft", "App_History")


def get_temporary_files_path() -> str:
    """Return the Temporary Files directory under the redirected all-users directory."""
    return _under(get_redirect_all_users_dir(), "Microsoft", "Temporary Files")


def get_mail_log_str_path(filename: str) -> str:
    """Return the path of ``filename`` in the Dbgctr directory under PROGRAMDATA."""
    folder = os.sep + _rel("Microsoft", "Dbgctr") + os.sep
    return combine(combine(get_environment_variable("PROGRAMDATA"), folder), filename)


def get_locallow_folder() -> str:
    """Return the LocalLow folder next to LOCALAPPDATA.

    Raises KeyError if LOCALAPPDATA is unset and ValueError if the result
    would not fit in MAX_PATH.
    """
    base = _env("LOCALAPPDATA")
    if len(base) + 3 >= MAX_PATH:
        raise ValueError("path too long for MAX_PATH")
    return base + "Low"


def get_all_user_folder() -> str:
    """Return the HelpClr folder under PROGRAMDATA; KeyError if it is unset."""
    return _env("PROGRAMDATA") + os.sep + _rel("Microsoft", "HelpClr")


def get_all_user_temp_folder() -> str:
    """Return the Temporary Files folder under PROGRAMDATA; KeyError if it is unset."""
    return _env("PROGRAMDATA") + os.sep + _rel("Microsoft", "Temporary Files")


def get_ini_string(fullpath: str, section: str, key: str) -> str:
    """Return the value of ``key`` in ``section`` of an INI file, or '' if absent."""
    value = _profile_string(fullpath, section, key)
    if not value:
        logger.warning("in section %s, key %s not found", section, key)
    return value