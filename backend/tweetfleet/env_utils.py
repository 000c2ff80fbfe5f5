"""Environment helpers with optional Docker secret file support."""

from __future__ import annotations

from pathlib import Path
import os


def get_env(name: str, default: str = "") -> str:
    """Resolve a secret from ``NAME`` or, when unset, the file named by ``NAME_FILE``."""
    value = os.getenv(name)
    if value:
        return value

    file_path = (os.getenv(f"{name}_FILE") or "").strip()
    if not file_path:
        return default
    try:
        secret = Path(file_path).read_text(encoding="utf-8").strip()
    except OSError:
        return default
    return secret or default
