from __future__ import annotations
from typing import Any, Callable, Dict, Optional

ProgressCallback = Callable[[Dict[str, Any]], None]


class Progress:
    """
    Forwards progress events to an optional user callback.
    Event shape: {"phase": "<operation>.start|done", "pct": 0..100, "msg": str}
    """

    def __init__(self, callback: Optional[ProgressCallback] = None) -> None:
        self._callback = callback

    def emit(self, phase: str, pct: int, msg: str = "") -> None:
        if self._callback is None:
            return
        self._callback({"phase": phase, "pct": int(pct), "msg": msg})

    def start(self, operation: str, msg: str = "") -> None:
        self.emit(f"{operation}.start", 0, msg)

    def done(self, operation: str, msg: str = "") -> None:
        self.emit(f"{operation}.done", 100, msg)
