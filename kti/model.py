# kti/model.py

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Outcome(str, Enum):
    """How a detection attempt ended."""
    DETECTED = "detected"
    UNKNOWN = "unknown"
    READ_ERROR = "read_error"


@dataclass(frozen=True)
class DetectionResult:
    """Represents the result of a file type detection."""
    outcome: Outcome
    ext: Optional[str] = None  # detected extension (no dot), only set when DETECTED
    mime: str = ""             # best-effort MIME type
    reason: str = ""           # rule that matched, or unknown / read-error
    error: str = ""            # cause, only set when READ_ERROR

    @property
    def detected(self) -> bool:
        return self.outcome is Outcome.DETECTED


@dataclass
class ScanRow:
    """Represents one visited file, for the console and CSV reports."""
    path: str
    name: str
    current_ext: Optional[str]
    detected_ext: Optional[str]
    detected_mime: str
    outcome: str
    is_different: bool
    action: str       # one of: none | rename | dry-run | error
    new_path: str
    error: str
    reason: str


@dataclass
class ScanTotals:
    """Counters accumulated over a run."""
    files: int = 0
    differences: int = 0
    renamed: int = 0
    errors: int = 0


@dataclass
class Options:
    """Effective run options after merging the JSON config and CLI flags."""
    path: str = "."
    show_hidden: bool = False
    max_depth: Optional[int] = None
    only_diff: bool = False
    silent: bool = False
    follow_links: bool = False
    dry_run: bool = False
    color: bool = False
    report: Optional[str] = None
