"""core/tuning.py — Gameplay numbers from ``data/tuning.toml``.

    from core.tuning import get
    window = get("player", "invuln_duration", 1.5)

Sections are dotted paths into the TOML tables (``"enemy.strong"`` is
``[enemy.strong]``).  Each call site carries its own default, so a
missing file or key falls back silently and the tests need nothing on
disk.  ``reload()`` re-reads the last file (F4 in game).
"""

from __future__ import annotations
from pathlib import Path

try:
    import tomllib                         # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib                # pip install tomli

_DEFAULT_PATH = Path(__file__).resolve().parent.parent / "data" / "tuning.toml"

_data: dict = {}
_path: Path = _DEFAULT_PATH


def load(path: str | Path | None = None) -> None:
    global _data, _path
    _path = Path(path) if path is not None else _DEFAULT_PATH
    if not _path.exists():
        print(f"[TUNING] {_path} not found, using defaults")
        _data = {}
        return
    with open(_path, "rb") as f:
        _data = tomllib.load(f)
    print(f"[TUNING] Loaded {_count_leaves(_data)} values from {_path}")


def reload() -> None:
    load(_path)


def _table(section_path: str) -> dict | None:
    node = _data
    for part in section_path.split("."):
        node = node.get(part) if isinstance(node, dict) else None
        if node is None:
            return None
    return node if isinstance(node, dict) else None


def get(section: str, key: str, default=None):
    """Value of *key* in *section*, or *default*.

    >>> get("enemy.strong", "health", 2)
    2
    """
    table = _table(section)
    return default if table is None else table.get(key, default)


def table_list(key: str) -> list[dict]:
    """Top-level array of tables (``[[key]]``), empty if absent."""
    value = _data.get(key)
    if not isinstance(value, list):
        return []
    return [dict(v) for v in value if isinstance(v, dict)]


def _count_leaves(node) -> int:
    if isinstance(node, dict):
        return sum(_count_leaves(v) for v in node.values())
    if isinstance(node, list) and node and isinstance(node[0], dict):
        return sum(_count_leaves(v) for v in node)
    return 1
