# kti/policy.py

from __future__ import annotations
from pathlib import Path
from typing import Optional

from .model import DetectionResult

# A file without an extension. Never equal to any detected extension.
NO_EXTENSION: Optional[str] = None


def current_extension(path: Path) -> Optional[str]:
    """Return the file's extension without the dot, case preserved, or NO_EXTENSION."""
    return path.suffix[1:] if path.suffix else NO_EXTENSION


def is_different(current: Optional[str], detected: Optional[str]) -> bool:
    """Decide whether the current extension disagrees with the detected one.

    ``detected`` is None when nothing could be detected (unknown content or a
    read error); such files are never reported. ``jpeg`` is accepted for a
    detected ``jpg``, but not the other way around. Comparison is case
    sensitive.
    """
    if detected is None:
        return False
    if current == "jpeg" and detected == "jpg":
        return False
    if current == detected:
        return False
    return True


def mismatch(current: Optional[str], result: DetectionResult) -> bool:
    return is_different(current, result.ext if result.detected else None)
