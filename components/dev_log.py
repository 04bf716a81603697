"""components.dev_log — Bounded log of what the simulation decided.

Enemy state changes, combat outcomes, level transitions and isolated
per-entity failures all land here as small dicts::

    {"t": 12.3, "eid": 7, "cat": "ai", "msg": "wander → chase",
     "details": {"dist": 61.2}}

Categories in use: ``ai``, ``combat``, ``level``, ``error``.  Tests read
entries directly instead of scraping stdout.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field


@dataclass
class DevLog:
    max_entries: int = 300
    # Empty = keep everything
    cat_filter: set[str] = field(default_factory=set)
    entries: deque = field(init=False)

    def __post_init__(self):
        self.entries = deque(maxlen=self.max_entries)

    def record(self, eid: int, cat: str, msg: str, *,
               t: float = 0.0, details: dict | None = None) -> None:
        if self.cat_filter and cat not in self.cat_filter:
            return
        self.entries.append({"t": t, "eid": eid, "cat": cat,
                             "msg": msg, "details": details})

    def clear(self):
        self.entries.clear()

    def recent(self, n: int = 20) -> list[dict]:
        return list(self.entries)[-n:]

    def for_cat(self, cat: str, n: int = 50) -> list[dict]:
        return [e for e in self.entries if e["cat"] == cat][-n:]
