"""
Module: extractor.timing

Purpose:
    Timing instrumentation for the extraction pipeline. Records how long
    each stage took for a document so slow OCR runs and slow layouts can
    be told apart.

Key Classes:
    - TimingLog: Collects phase durations for one document

Key Functions:
    - timed_phase: Context manager for timing code blocks

Dependencies:
    - time (std)
    - contextlib (std)
    - extractor.file_locking: Merging saved timings across documents

Used By:
    - extractor.pipeline: Wraps each stage
    - extractor.batch: Saves per-document timings to a shared file
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Generator, List, Tuple

logger = logging.getLogger(__name__)


@dataclass
class TimingLog:
    """
    Phase durations for one document.

    A phase timed more than once (e.g. line grouping for the text layer
    and again for OCR) accumulates.

    Attributes:
        document: Document label used as the key when saving.
        phases: phase_name -> total duration in seconds.

    Example:
        >>> log = TimingLog("quiz.pdf")
        >>> with timed_phase(log, "open_document"):
        ...     doc = open_document(path)
        >>> print(log.summary())
    """
    document: str = ""
    phases: Dict[str, float] = field(default_factory=dict)

    def log(self, phase: str, duration: float) -> None:
        self.phases[phase] = self.phases.get(phase, 0.0) + duration

    @property
    def total(self) -> float:
        return sum(self.phases.values())

    def slowest_phases(self, n: int = 3) -> List[Tuple[str, float]]:
        ranked = sorted(self.phases.items(), key=lambda item: item[1], reverse=True)
        return ranked[:n]

    def summary(self) -> str:
        """Generate human-readable timing summary."""
        lines = ["", f"=== Extraction Timing: {self.document or '<document>'} ==="]
        for phase, duration in self.slowest_phases(len(self.phases)):
            lines.append(f"  {phase:25s} {duration:.3f}s")
        lines.append(f"  {'total':25s} {self.total:.3f}s")
        lines.append("")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phases": {phase: round(duration, 6) for phase, duration in self.phases.items()},
            "total": round(self.total, 6),
        }

    def save(self, path: Path, merge: bool = True) -> None:
        """
        Save timing data to a JSON file keyed by document.

        PARALLEL SAFE: with merge=True (default) the file is updated under
        an exclusive lock so concurrent documents each add their entry.
        """
        if not merge:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                json.dump({"documents": {self.document: self.to_dict()}}, f, indent=2)
            logger.debug(f"Saved timing data to {path}")
            return

        from .file_locking import locked_read_modify_write_json

        def merge_document(existing: Dict[str, Any]) -> Dict[str, Any]:
            documents = existing.setdefault("documents", {})
            documents[self.document] = self.to_dict()
            existing["slowest_documents"] = [
                {"document": name, "total": entry.get("total", 0.0)}
                for name, entry in sorted(
                    documents.items(),
                    key=lambda item: item[1].get("total", 0.0),
                    reverse=True,
                )[:5]
            ]
            return existing

        locked_read_modify_write_json(path, merge_document, default=lambda: {"documents": {}})
        logger.debug(f"Merged timing data for {self.document} into {path}")


@contextmanager
def timed_phase(log: TimingLog, phase: str) -> Generator[None, None, None]:
    """
    Context manager for timing a code phase.

    The duration is recorded even when the block raises.

    Example:
        >>> log = TimingLog()
        >>> with timed_phase(log, "line_grouping"):
        ...     lines = group_lines(words, tolerance=3.0)
    """
    start = time.perf_counter()
    try:
        yield
    finally:
        log.log(phase, time.perf_counter() - start)
