"""Multi-threaded ZIP extraction that refuses unsafe archives."""

from __future__ import annotations

import shutil
import stat
import threading
import zipfile
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from os import PathLike, fspath
from pathlib import Path

_DEFAULT_THREADS = 4
_MAX_ENTRY_SIZE = 1 << 30
_COPY_BUFFER = 64 * 1024
_UNIX_SYSTEM = 3


class UnzipError(Exception):
    """Raised when an archive cannot be extracted as a whole."""


@dataclass(frozen=True)
class _Entry:
    info: zipfile.ZipInfo
    is_dir: bool
    is_symlink: bool


def is_sub_path(base: str | PathLike[str], child: str | PathLike[str]) -> bool:
    """Return True if ``child`` lies within ``base``.

    Both paths are resolved (they need not exist) and compared as
    lower-case strings, so the check ignores letter case.
    """
    try:
        resolved_base = Path(fspath(base)).resolve()
        resolved_child = Path(fspath(child)).resolve()
    except (OSError, RuntimeError):
        return False
    return str(resolved_child).lower().startswith(str(resolved_base).lower())


def _is_symlink(info: zipfile.ZipInfo) -> bool:
    if info.create_system != _UNIX_SYSTEM:
        return False
    return stat.S_ISLNK(info.external_attr >> 16)


def _scan(archive: zipfile.ZipFile) -> list[_Entry]:
    infos = archive.infolist()
    if not infos:
        raise UnzipError("archive holds no entries")
    entries = []
    for info in infos:
        if info.file_size > _MAX_ENTRY_SIZE:
            raise UnzipError(
                f"entry {info.filename!r} is larger than {_MAX_ENTRY_SIZE} bytes"
            )
        entries.append(
            _Entry(
                info=info,
                is_dir=info.filename.endswith("/"),
                is_symlink=_is_symlink(info),
            )
        )
    return entries


def unzip(
    zip_path: str | PathLike[str],
    out_dir: str | PathLike[str],
    max_threads: int = _DEFAULT_THREADS,
) -> list[Path]:
    """Extract ``zip_path`` into ``out_dir`` using up to ``max_threads`` threads.

    Directory entries are skipped, as are entries whose destination would
    leave ``out_dir`` or that cannot be read or written. Returns the paths
    of the extracted files, in archive order.

    Raises UnzipError if the archive is missing, unreadable or empty, if an
    entry exceeds 1 GiB, if it holds a symbolic link, or if no file at all
    was extracted.
    """
    archive_path = Path(fspath(zip_path)).resolve()
    if not archive_path.exists():
        raise UnzipError(f"archive not found: {archive_path}")

    out_root = Path(fspath(out_dir))
    try:
        out_root.mkdir(parents=True, exist_ok=True)
        out_canonical = out_root.resolve()
    except OSError as exc:
        raise UnzipError(f"cannot create output directory {out_root}: {exc}") from exc

    try:
        archive = zipfile.ZipFile(archive_path)
    except (zipfile.BadZipFile, OSError) as exc:
        raise UnzipError(f"cannot open archive {archive_path}: {exc}") from exc

    with archive:
        entries = _scan(archive)
        dir_lock = threading.Lock()
        saw_symlink = threading.Event()

        def extract(entry: _Entry) -> Path | None:
            if entry.is_dir:
                return None
            if entry.is_symlink:
                saw_symlink.set()
                return None
            destination = out_root / entry.info.filename
            parent = destination.parent
            if not is_sub_path(out_canonical, parent):
                return None
            with dir_lock:
                try:
                    parent.mkdir(parents=True, exist_ok=True)
                except OSError:
                    return None
            try:
                with archive.open(entry.info) as source, open(destination, "wb") as target:
                    shutil.copyfileobj(source, target, _COPY_BUFFER)
            except (OSError, zipfile.BadZipFile, RuntimeError):
                return None
            return destination

        workers = max_threads if max_threads > 0 else _DEFAULT_THREADS
        workers = min(workers, len(entries))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(extract, entries))

    if saw_symlink.is_set():
        raise UnzipError("archive contains symbolic links")
    extracted = [path for path in results if path is not None]
    if not extracted:
        raise UnzipError("no files were extracted")
    return extracted