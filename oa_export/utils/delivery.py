from __future__ import annotations
from pathlib import Path
from typing import Callable

Deliver = Callable[[bytes, str, str], None]
"""File-delivery collaborator: (blob, filename, mime_type) -> None."""

def save_to_dir(out_dir: Path | str) -> Deliver:
    """Returns a delivery callable that writes each blob into `out_dir`."""
    root = Path(out_dir)

    def _deliver(blob: bytes, filename: str, mime_type: str) -> None:
        root.mkdir(parents=True, exist_ok=True)
        # temp file + rename: `target` is either absent or complete
        target = root / Path(filename).name
        tmp = target.with_name(target.name + ".part")
        try:
            tmp.write_bytes(blob)
            tmp.replace(target)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise

    return _deliver
