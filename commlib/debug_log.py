"""File logging with per-module configuration and size-based rotation."""

from __future__ import annotations

import logging
import os
import re
import threading
from datetime import datetime
from enum import IntEnum
from pathlib import Path

from commlib.filesystem import combine, file_exists, get_app_history_path, get_ini_string
from commlib.sync import CriticalSection

logger = logging.getLogger(__name__)

MSG_SZ = 1024
KEY_SIZE = 128
DEFAULT_LOG_SIZE = 5
_INT_PREFIX = re.compile(r"\s*([-+]?\d+)")


class DebugLevel(IntEnum):
    """Verbosity levels; a higher value lets more messages through."""

    OFF = 0
    FATAL = 100
    ERROR = 200
    WARN = 300
    INFO = 400
    DEBUG = 500
    TRACE = 600


def debug_level_filter(name: str) -> DebugLevel:
    """Map an exact upper-case level name to its level; anything else is INFO."""
    try:
        return DebugLevel[name] if name == name.upper() else DebugLevel.INFO
    except KeyError:
        return DebugLevel.INFO


def _ini_int(path: str, section: str, key: str, default: int) -> int:
    value = get_ini_string(path, section, key)
    if not value:
        return default
    match = _INT_PREFIX.match(value)
    return int(match.group(1)) if match else 0


class DebugLog:
    """Writes time-stamped messages to ``<key>.newest.log`` in the log directory.

    Logging is switched on by the presence of ``<key>.conf`` and echoing to
    the debug output by ``<key>.debug.conf``. When the newest log grows past
    ``log_size`` megabytes it is moved to ``<key>.archive.log``.
    """

    def __init__(self, base_dir: str | os.PathLike[str] | None = None, extended: bool = False) -> None:
        self._base_dir = os.fspath(base_dir) if base_dir is not None else ""
        self._extended = extended
        self._lock = CriticalSection()
        self.log_enabled = False
        self.debug_enabled = False
        self.level = DebugLevel.OFF
        self.log_size = DEFAULT_LOG_SIZE
        self.extra_setting = False
        self.key = ""
        self.log_dir = ""
        self.newest_path = ""
        self.archive_path = ""
        self.conf_path = ""
        self.debug_conf_path = ""

    def init(self, key: str) -> None:
        """Set the module key and switch logging on or off from the config files."""
        self.key = key[:KEY_SIZE]
        if not self.get_log_path():
            return
        enable_log = self.check_log_conf_exist()
        enable_debug = self.check_debug_conf_exist()
        if not self.log_enabled and enable_log:
            self.log_enabled = True
        elif self.log_enabled and not enable_log:
            self.stop()
        self.debug_enabled = enable_debug

    def stop(self) -> None:
        """Stop writing to the log file."""
        self.log_enabled = False

    def read_config(self, filename: str) -> DebugLevel:
        """Read ``debug_level`` from the ``[DEBUG]`` section; INFO when absent."""
        return debug_level_filter(get_ini_string(filename, "DEBUG", "debug_level") or "INFO")

    def check_log_conf_exist(self) -> bool:
        """Load settings from the log config file; return whether it exists."""
        if not self.conf_path or not file_exists(self.conf_path):
            return False
        self.log_size = _ini_int(self.conf_path, "DEBUG", "log_size", DEFAULT_LOG_SIZE)
        self.level = self.read_config(self.conf_path)
        if self._extended:
            self._read_extra_settings(self.conf_path)
        return True

    def _read_extra_settings(self, conf: str) -> None:
        self.extra_setting = bool(_ini_int(conf, "DEBUG", "log_size", DEFAULT_LOG_SIZE))

    def check_debug_conf_exist(self) -> bool:
        """Return whether the debug-output config file exists."""
        return bool(self.debug_conf_path) and file_exists(self.debug_conf_path)

    def get_log_path(self) -> str:
        """Work out the log directory and file paths once; return the directory or ''."""
        if self.log_dir:
            return self.log_dir
        base = self._base_dir or get_app_history_path()
        if not base:
            return ""
        self.log_dir = base
        self.newest_path = combine(base, self.key + ".newest.log")
        self.archive_path = combine(base, self.key + ".archive.log")
        self.conf_path = combine(base, self.key + ".conf")
        self.debug_conf_path = combine(base, self.key + ".debug.conf")
        return self.log_dir

    def log(self, message: str) -> None:
        """Write ``message`` with a time, process and thread header, if logging is on."""
        if not self.log_enabled:
            return
        with self._lock:
            now = datetime.now()
            header = (
                f"{now.year}/{now.month:02}/{now.day:02} "
                f"{now.hour:02}:{now.minute:02}:{now.second:02}.{now.microsecond // 1000:03} "
                f"[Pid={os.getpid():5}][Tid={threading.get_native_id():5}]"
            )
            text = (header + message)[: MSG_SZ - 3]
            if self.debug_enabled:
                logger.debug("%s", text)
            self.write_to_file(text + "\r\n")

    def write_to_file(self, message: str) -> None:
        """Append ``message`` (at most MSG_SZ bytes) to the newest log, rotating first."""
        if not self.newest_path:
            return
        newest = Path(self.newest_path)
        try:
            if newest.exists() and newest.stat().st_size > 1024 * 1024 * self.log_size:
                archive = Path(self.archive_path)
                if archive.exists():
                    archive.unlink()
                newest.rename(archive)
            data = message.encode("utf-8")[:MSG_SZ]
            with open(newest, "ab") as handle:
                handle.write(data)
        except OSError as error:
            logger.debug("cannot write log %s: %s", newest, error)