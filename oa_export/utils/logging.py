from __future__ import annotations
import json, sys
from datetime import datetime, UTC
from pathlib import Path
from typing import Any, Dict

class RunLogger:
    """
    Appends one JSON object per event to <log_dir>/oa_export.log.
    WARN and ERROR events are echoed to stderr as well.

    `bind(**fields)` returns a logger sharing the same file that stamps
    every event with `fields` (e.g. the upstream source of a search).
    """
    def __init__(self, log_dir: Path | str, context: Dict[str, Any] | None = None):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.log_path = self.log_dir / "oa_export.log"
        self.context: Dict[str, Any] = dict(context or {})

    def bind(self, **kv) -> "RunLogger":
        return RunLogger(self.log_dir, {**self.context, **kv})

    def _ts(self) -> str:
        return datetime.now(UTC).isoformat(timespec="seconds").replace("+00:00", "Z")

    def info(self, msg: str, **kv):
        self._emit("INFO", msg, kv)

    def warn(self, msg: str, **kv):
        self._emit("WARN", msg, kv)

    def error(self, msg: str, **kv):
        self._emit("ERROR", msg, kv)

    def _emit(self, level: str, msg: str, kv: Dict[str, Any]):
        line = {"ts": self._ts(), "level": level, "msg": msg, **self.context, **kv}
        txt = json.dumps(line, ensure_ascii=False, default=str)
        with self.log_path.open("a", encoding="utf-8") as f:
            f.write(txt + "\n")
        # Surface problems on the console too
        if level in {"ERROR", "WARN"}:
            print(txt, file=sys.stderr)
