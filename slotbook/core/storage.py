"""Whole-document JSON persistence for the config and bookings files."""

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any

# One lock per file, shared by every store instance pointing at it
_locks: dict[Path, threading.RLock] = {}
_locks_guard = threading.Lock()


def lock_for(path: Path) -> threading.RLock:
    key = Path(path).resolve()
    with _locks_guard:
        return _locks.setdefault(key, threading.RLock())


def read_json(path: Path) -> Any:
    """Read and parse a JSON document. Raises FileNotFoundError / ValueError."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def write_json(path: Path, data: Any) -> None:
    """Rewrite the whole document atomically (temp file in the same dir, then rename)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write("\n")
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
