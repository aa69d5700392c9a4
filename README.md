# x360make

x360make is a library of three helpers for a build front-end. It uses only the standard library.

- **`x360make.locale`** loads translation tables from `lang_<code>.json` files.
- **`x360make.logger`** is a file logger that writes from a background thread and rotates its file by size.
- **`x360make.unzip`** extracts ZIP archives with several threads. It refuses archives that are unsafe.

## Installation

```
pip install .
```

To include the test dependencies:

```
pip install ".[test]"
```

## Translations

```python
from x360make.locale import Locale

loc = Locale("lang")               # base directory, "lang" by default
path = loc.load_language("de")     # returns the file that was read
print(loc.translate("btnBuild"))
```

`load_language(code)` reads `<base_dir>/lang_<code>.json`. If that file does not exist, it reads `lang_en.json` from the same directory instead.

The current table is emptied before anything else happens, so a failed load leaves no translations. `load_language` raises in these cases:

- `ValueError` if the code is unsafe, if the resolved file lies outside the base directory, if the file is not valid UTF-8 or JSON, or if its top level is not an object;
- `FileNotFoundError` if the base directory is missing, or if neither the requested file nor `lang_en.json` exists.

A leading UTF-8 byte order mark is accepted. Entries with an empty key are skipped, and so are entries whose value is not a string.

`translate(key)` returns the text for `key`. It returns the key itself when the key is unknown, and `""` for an empty key. Both methods are thread-safe.

The module also provides two helper functions:

- `is_safe_lang_code(code)` returns true for codes of 1 to 16 characters taken from ASCII letters, digits, `_` and `-`.
- `decode_utf8(data)` decodes bytes strictly and drops a leading BOM. It raises `UnicodeDecodeError` on malformed input.

## Logging

```python
from x360make.logger import AsyncFileLogger, LoggerConfig, LogLevel

config = LoggerConfig(filename="build.log", console_output=False, min_level=LogLevel.DEBUG)
with AsyncFileLogger(config) as log:
    log.log(LogLevel.INFO, "build started")
```

`LoggerConfig` has the following fields:

| Field | Default |
| --- | --- |
| `filename` | required |
| `max_file_size` | 10 MiB |
| `console_output` | `True` (each line is also written to standard output) |
| `min_level` | `LogLevel.INFO` |
| `max_queue_size` | 10000 |

Constructing the logger truncates the file and writes a UTF-8 BOM. If the file cannot be opened, it raises `OSError`.

The levels are `DEBUG`, `INFO`, `WARNING`, `ERROR` and `FATAL`. Records below `min_level` are ignored. If the pending queue already holds `max_queue_size` records, it is cleared before the new record is added.

Each line has this form:

```
[YYYY-MM-DD HH:MM:SS] [INFO] message
```

`WARNING` is written as `[WARN]`. You can build lines and timestamps yourself with `format_line(level, message, moment=None)` and `format_timestamp(moment=None)`. Both use the current local time when no moment is given.

When the file reaches `max_file_size` bytes, it is renamed to `<name>.<timestamp>.log`. If that name is taken, it is renamed to `<name>.<timestamp>_<n>.log` for `n` from 1 to 999. A fresh file is then started.

`close()` waits until every queued record has been written. The context manager calls `close()` for you.

## Extracting archives

```python
from x360make.unzip import unzip, UnzipError

try:
    files = unzip("package.zip", "out", 4)
except UnzipError as err:
    print("extraction failed:", err)
```

`unzip(zip_path, out_dir, max_threads=4)` creates `out_dir` if needed and returns the paths of the extracted files in archive order. A thread count of zero or less means 4.

Directory entries are skipped. So are entries whose destination would lie outside `out_dir`, and entries that cannot be read or written.

`UnzipError` is raised in these cases:

- the archive is missing, unreadable or empty;
- the output directory cannot be created;
- an entry is larger than 1 GiB;
- the archive holds a symbolic link;
- no file was extracted at all.

`is_sub_path(base, child)` reports whether `child` lies inside `base`. It resolves both paths and compares them without regard to letter case.

## What this package does not do

It has no command-line or graphical front-end. It does not download files, and it does not build or pack executables. It provides only the translation, logging and extraction pieces listed above.

## Running the tests

```
pytest
```