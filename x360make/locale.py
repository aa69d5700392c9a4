"""Thread-safe translation tables loaded from ``lang_<code>.json`` files."""

from __future__ import annotations

import json
import string
import threading
from os import PathLike
from pathlib import Path

_SAFE_CHARS = frozenset(string.ascii_letters + string.digits + "_-")
_MAX_CODE_LENGTH = 16
_UTF8_BOM = b"\xef\xbb\xbf"
_FALLBACK_FILE = "lang_en.json"


def is_safe_lang_code(code: str) -> bool:
    """Return True if ``code`` is 1-16 characters drawn from ``[A-Za-z0-9_-]``."""
    return 0 < len(code) <= _MAX_CODE_LENGTH and all(ch in _SAFE_CHARS for ch in code)


def decode_utf8(data: bytes) -> str:
    """Strictly decode UTF-8 bytes, dropping a leading byte order mark.

    Raises UnicodeDecodeError (a ValueError) on malformed input.
    """
    if data.startswith(_UTF8_BOM):
        data = data[len(_UTF8_BOM):]
    return data.decode("utf-8")


class Locale:
    """A key to text mapping read from a language directory."""

    def __init__(self, base_dir: str | PathLike[str] = "lang") -> None:
        self.base_dir = Path(base_dir)
        self._table: dict[str, str] = {}
        self._lock = threading.Lock()

    def load_language(self, lang_code: str) -> Path:
        """Load ``lang_<code>.json`` from the base directory.

        Falls back to ``lang_en.json`` when the requested file is missing.
        The current table is emptied first, so a failed load leaves no
        translations behind. Returns the path of the file that was read.
        """
        with self._lock:
            self._table = {}

            if not is_safe_lang_code(lang_code):
                raise ValueError(f"unsafe language code: {lang_code!r}")
            if not self.base_dir.is_dir():
                raise FileNotFoundError(f"language directory not found: {self.base_dir}")

            base = self.base_dir.resolve()
            candidate = (self.base_dir / f"lang_{lang_code}.json").resolve()
            if not str(candidate).startswith(str(base)):
                raise ValueError(f"language file escapes {base}: {candidate}")

            if not candidate.exists():
                candidate = base / _FALLBACK_FILE
                if not candidate.exists():
                    raise FileNotFoundError(
                        f"no file for language {lang_code!r} and no {_FALLBACK_FILE}"
                    )

            try:
                document = json.loads(decode_utf8(candidate.read_bytes()))
            except ValueError as exc:
                raise ValueError(f"malformed language file {candidate}: {exc}") from exc
            if not isinstance(document, dict):
                raise ValueError(f"language file {candidate} does not hold an object")

            self._table = {
                key: value
                for key, value in document.items()
                if key and isinstance(value, str)
            }
            return candidate

    def translate(self, key: str) -> str:
        """Return the text for ``key``, or ``key`` itself when it is unknown."""
        if not key:
            return ""
        with self._lock:
            return self._table.get(key, key)