"""Binary command-log streams: ints, doubles, UTF-16 strings and system times."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from datetime import datetime
from os import PathLike
from typing import BinaryIO, Union

_FILETIME_EPOCH = datetime(1601, 1, 1)
_DELPHI_EPOCH_TICKS = 94353120000000000
_TICKS_PER_DAY = 864000000000
_DOUBLE = struct.Struct("<d")
_SYSTEMTIME = struct.Struct("<8H")

StrPath = Union[str, "PathLike[str]"]


def system_to_delphi_time(moment: datetime) -> float:
    """Return ``moment`` as a Delphi date-time: days since 1899-12-30.

    The wall-clock fields are used as they are, to millisecond precision.
    """
    delta = moment.replace(tzinfo=None) - _FILETIME_EPOCH
    ticks = (delta.days * 86400 + delta.seconds) * 10_000_000
    ticks += (delta.microseconds // 1000) * 10_000
    return (ticks - _DELPHI_EPOCH_TICKS) / _TICKS_PER_DAY


@dataclass
class CommandLog:
    """One record of a command log."""

    kind: int
    time: float
    log: str


class WriteFileStream:
    """Writes command-log records to a file, replacing what was there."""

    def __init__(self, path: StrPath) -> None:
        self._file: BinaryIO = open(path, "wb")

    def __enter__(self) -> "WriteFileStream":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def write_wstring(self, value: str) -> None:
        """Write a byte length, then the UTF-16 text up to its first NUL with a NUL."""
        data = value.split("\0", 1)[0].encode("utf-16-le") + b"\0\0"
        self.write_int(len(data))
        self._file.write(data)

    def write_int(self, value: int) -> None:
        """Write a signed 32-bit integer; raises OverflowError when out of range."""
        self._file.write(value.to_bytes(4, "little", signed=True))

    def write_double(self, value: float) -> None:
        """Write an IEEE 754 double."""
        self._file.write(_DOUBLE.pack(value))

    def write_system_time(self, value: datetime) -> None:
        """Write ``value`` as eight 16-bit fields, day of week counted from Sunday."""
        self._file.write(
            _SYSTEMTIME.pack(
                value.year,
                value.month,
                value.isoweekday() % 7,
                value.day,
                value.hour,
                value.minute,
                value.second,
                value.microsecond // 1000,
            )
        )

    def write_cmd(self, kind: int, moment: datetime, value: str) -> None:
        """Write one record: kind, Delphi time of ``moment``, then the text."""
        self.write_int(kind)
        self.write_double(system_to_delphi_time(moment))
        self.write_wstring(value)

    def set_eof(self) -> None:
        """Cut the file off at the current position."""
        self._file.flush()
        self._file.truncate()

    def close(self) -> None:
        """Close the file."""
        self._file.close()


class ReadFileStream:
    """Reads command-log records from an existing file."""

    def __init__(self, path: StrPath) -> None:
        self._file: BinaryIO = open(path, "rb")

    def __enter__(self) -> "ReadFileStream":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def _read(self, size: int) -> bytes:
        data = self._file.read(size)
        if len(data) < size:
            raise EOFError(f"expected {size} bytes, got {len(data)}")
        return data

    def read_wstring(self) -> str:
        """Read a length-prefixed UTF-16 string, up to its first NUL."""
        size = self.read_int()
        if size < 0:
            raise ValueError(f"negative string length {size}")
        data = self._read((size // 2) * 2)
        return data.decode("utf-16-le", errors="replace").split("\0", 1)[0]

    def read_int(self) -> int:
        """Read a signed 32-bit integer."""
        return int.from_bytes(self._read(4), "little", signed=True)

    def read_double(self) -> float:
        """Read an IEEE 754 double."""
        return _DOUBLE.unpack(self._read(_DOUBLE.size))[0]

    def read_system_time(self) -> datetime:
        """Read eight 16-bit time fields into a naive datetime."""
        year, month, _, day, hour, minute, second, millis = _SYSTEMTIME.unpack(
            self._read(_SYSTEMTIME.size)
        )
        return datetime(year, month, day, hour, minute, second, millis * 1000)

    def read_cmd(self) -> CommandLog:
        """Read one record written by ``WriteFileStream.write_cmd``."""
        kind = self.read_int()
        time = self.read_double()
        log = self.read_wstring()
        return CommandLog(kind, time, log)

    def close(self) -> None:
        """Close the file."""
        self._file.close()