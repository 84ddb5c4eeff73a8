# commlib

Small utilities with no third-party dependencies.

## Modules

- `commlib.strings`
  - `begins_with` and `ends_with` check prefixes and suffixes.
  - `string_split` splits at any character in a delimiter set. It keeps empty pieces between adjacent delimiters and drops a trailing empty piece.
  - `replace_string` replaces substrings.
  - `to_lower` and `to_upper` change the case of ASCII letters only.
  - Code-page conversion, all of which stops at the first NUL: `wide_to_multibyte`, `multibyte_to_wide`, `to_utf8`, `from_utf8`, `to_ansi`, `from_ansi`, `ansi_to_utf8`, `multibyte_to_utf8`. A code page is given as a Windows code page number, such as `65001` or `20932`, or as a Python codec name.
- `commlib.hashing`
  - `combine_hash` mixes a hash into a 64-bit seed.
  - `bkdr_hash` is the BKDR string hash with seed 131. It returns a 31-bit value.
- `commlib.csv_parser`
  - `csv_parse` and `csv_parse_rec` split one CSV line into fields.
  - A quoted field keeps its surrounding quotes.
  - Within a field, `""` is collapsed to `"`.
  - A line that ends in a comma gives a final empty field.
- `commlib.sync`
  - `AutoStructure` holds one shared value behind a lock, with `get` and `set`.
  - `CriticalSection` is a re-entrant lock and a context manager. It records the thread that entered it through `with` (`owner`). `try_unlock` lets that thread release the lock early.
- `commlib.assembly`
  - `list_pe_sections` and `get_pe_section_info` read the section table of a PE image given as bytes, returning `PeSection` entries.
  - `byte_search` finds a byte pattern and returns its address.
  - `get_call_address` resolves the target of a relative CALL.
  - `addr_to_le`, `dw_reverse` and `le_to_dw` convert values to and from little-endian bytes.
- `commlib.file_stream`
  - `WriteFileStream` and `ReadFileStream` write and read the binary command-log format. Both are context managers.
  - Each record holds an int kind, a Delphi date-time double (`system_to_delphi_time`) and a length-prefixed, NUL-terminated UTF-16 string.
  - A record is read back as a `CommandLog`.
- `commlib.filesystem`
  - Paths and directories: `combine`, `get_parent`, `safe_create`, `delete_directory`.
  - Files: `file_exists`, `directory_exists`, `list_all`, `read_all`, `file_size`, `get_modified_time` (FILETIME ticks).
  - Application-data folders, derived from the `PROGRAMDATA` and `LOCALAPPDATA` environment variables: `get_all_users_dir`, `get_redirect_all_users_dir`, `get_app_history_path`, `get_help_clr_path`, `get_temporary_files_path`, `get_locallow_folder`, and related functions. `get_redirect_all_users_dir` follows a redirect set in `client.ini`.
  - `get_ini_string` reads one value from an INI file.
- `commlib.debug_log`
  - `DebugLog(base_dir=None, extended=False)` writes time-stamped lines to `<key>.newest.log`.
  - Logging is on only while `<key>.conf` exists in the log directory. That file's `[DEBUG]` section supplies `debug_level` and `log_size` in megabytes.
  - When the log grows past `log_size`, it is moved to `<key>.archive.log`.
  - If `<key>.debug.conf` exists, messages are also sent to Python's `logging` at debug level.
  - Levels are given by `DebugLevel`, and `debug_level_filter` maps a level name to a `DebugLevel`.

## Example

```python
from commlib.csv_parser import csv_parse
from commlib.hashing import bkdr_hash
from commlib.sync import CriticalSection

print(csv_parse("a,b,,c"))   # ['a', 'b', '', 'c']
print(bkdr_hash("hello"))

section = CriticalSection()
with section:
    pass
```

## What it does not do

- It does not read or write the Windows registry.
- It does not load native libraries or call into them.
- It does not inspect other processes or their memory.
- It does not query shell known-folder APIs. The folder helpers rely on environment variables and INI files instead.
- It does not read section tables from loaded modules. PE section tables are read only from image bytes that you pass in.

## Tests

```
pip install -e .[test]
pytest
```