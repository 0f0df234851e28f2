"""
Module: core.utils.file_locking

Purpose:
    Cross-platform file locking for reading and writing exported documents.
    Two entry surfaces can export or import the same file at once; the
    locks keep a reader from seeing a half-written document.

Key Functions:
    - locked_file: Context manager for locked file access
    - locked_read_json: Read a JSON document under a shared lock
    - locked_write_json: Replace a JSON document under an exclusive lock

Dependencies:
    - portalocker: Cross-platform file locking

Used By:
    - core.utils.serialization: Document save/load
    - legacy.adapter.load_legacy_file
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, IO

import portalocker

logger = logging.getLogger(__name__)


@contextmanager
def locked_file(
    path: Path,
    mode: str = 'r',
    lock_type: int = portalocker.LOCK_EX,
) -> Generator[IO[str], None, None]:
    """
    Context manager for cross-platform locked file access.

    Args:
        path: Path to file.
        mode: File open mode ('r', 'w', 'a', etc.).
        lock_type: Lock type (LOCK_EX for exclusive, LOCK_SH for shared).

    Yields:
        Open file handle with lock held.

    Raises:
        FileNotFoundError: If opened for reading and the file does not exist.

    Example:
        >>> with locked_file(path, 'w') as f:
        ...     f.write('data')
    """
    if 'r' not in mode:
        path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, mode, encoding='utf-8') as f:
        portalocker.lock(f, lock_type)
        try:
            yield f
        finally:
            portalocker.unlock(f)


def locked_read_json(path: Path) -> Any:
    """
    Read a JSON document while holding a shared lock.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the content is not valid JSON.
    """
    with locked_file(path, 'r', portalocker.LOCK_SH) as f:
        data = json.load(f)
    logger.debug(f"Read JSON document {path.name}")
    return data


def locked_write_json(path: Path, data: Any) -> None:
    """
    Write a JSON document while holding an exclusive lock.

    The file is truncated only after the lock is acquired.
    """
    with locked_file(path, 'a', portalocker.LOCK_EX) as f:
        f.seek(0)
        f.truncate()
        json.dump(data, f, indent=2, ensure_ascii=False)
    logger.debug(f"Wrote JSON document {path.name}")
