"""Atomic file writing helpers."""

import os
from pathlib import Path
from tempfile import NamedTemporaryFile


def atomic_write_text(path: Path, text: str, mode: int = 0o644) -> Path:
    """Write text to a file atomically.

    The content goes to a temporary file in the same directory whose
    permissions are set before any byte is written; ``os.replace()``
    then moves it into place, which is atomic on POSIX.

    Args:
        path: Destination file.
        text: Content to write.
        mode: Permission bits of the final file.

    Returns:
        The destination path.

    Raises:
        OSError: If the file cannot be written. The temporary file is
            removed in that case.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as f:
            tmp_path = Path(f.name)
            os.fchmod(f.fileno(), mode)
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except OSError:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise
    return path
