"""
Module: extractor.file_locking

Purpose:
    Cross-platform file locking for output files shared by concurrently
    processed documents. Uses portalocker for Mac, Windows, and Linux
    compatibility.

Key Functions:
    - locked_file: Context manager for locked file access
    - locked_append_jsonl: Append one JSON line under an exclusive lock
    - locked_read_modify_write_json: Update a JSON file under a lock

Dependencies:
    - portalocker: Cross-platform file locking

Used By:
    - extractor.batch: Question records (JSONL)
    - extractor.timing: Merged timing file
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Any, Callable, Dict, Generator

import portalocker

logger = logging.getLogger(__name__)


@contextmanager
def locked_file(
    path: Path,
    mode: str = "r",
    lock_type: int = portalocker.LOCK_EX,
) -> Generator[IO[str], None, None]:
    """
    Open ``path`` and hold a lock on it for the duration of the block.

    Args:
        path: Path to file. Parent directories are created.
        mode: File open mode ('r', 'a', 'r+', ...).
        lock_type: LOCK_EX for exclusive, LOCK_SH for shared.

    Example:
        >>> with locked_file(path, "a") as f:
        ...     f.write("data\\n")
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if "r" in mode and not path.exists():
        path.touch()

    with open(path, mode, encoding="utf-8") as f:
        portalocker.lock(f, lock_type)
        try:
            yield f
        finally:
            portalocker.unlock(f)


def locked_append_jsonl(path: Path, record: Dict[str, Any]) -> None:
    """
    Append a record as one JSON line with an exclusive lock.

    Example:
        >>> locked_append_jsonl(out_path, {"document": "quiz.pdf", "questions": []})
    """
    with locked_file(path, "a", portalocker.LOCK_EX) as f:
        f.write(json.dumps(record, ensure_ascii=False) + "\n")
    logger.debug(f"Appended record to {path.name}")


def locked_read_modify_write_json(
    path: Path,
    modifier: Callable[[Dict[str, Any]], Dict[str, Any]],
    default: Callable[[], Dict[str, Any]] = dict,
) -> Dict[str, Any]:
    """
    Read JSON, apply ``modifier``, write the result back under one lock.

    Returns:
        The data that was written.
    """
    with locked_file(path, "r+", portalocker.LOCK_EX) as f:
        content = f.read()
        existing = json.loads(content) if content.strip() else default()

        modified = modifier(existing)

        f.seek(0)
        f.truncate()
        json.dump(modified, f, indent=2, ensure_ascii=False)
    return modified
