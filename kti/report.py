# kti/report.py

from __future__ import annotations
import csv
from pathlib import Path
from typing import Iterable, List

from termcolor import colored

from .model import Outcome, ScanRow

NO_EXTENSION_LABEL = "No extension"
NOT_DETECTED_LABEL = "Not detected"

# --- console --------------------------------------------------------------------


def _paint(text: str, tint: str, color: bool) -> str:
    # --color forces escapes even when stdout is not a tty
    return colored(text, tint, force_color=True) if color else text


def current_label(row: ScanRow) -> str:
    return row.current_ext if row.current_ext is not None else NO_EXTENSION_LABEL


def detected_label(row: ScanRow) -> str:
    if row.outcome == Outcome.DETECTED.value:
        return row.detected_ext or ""
    if row.outcome == Outcome.READ_ERROR.value:
        return row.error
    return NOT_DETECTED_LABEL


def should_print(different: bool, silent: bool, only_diff: bool) -> bool:
    if silent:
        return False
    return different or not only_diff


def format_report(row: ScanRow, color: bool = False) -> str:
    """Build the console block for one file.

    With ``color``, the current extension is red when it differs from the
    detected one; placeholders for a missing extension or an undetected
    type are yellow.
    """
    cur = current_label(row)
    if row.current_ext is None:
        cur = _paint(cur, "yellow", color)
    else:
        cur = _paint(cur, "light_red" if row.is_different else "light_green", color)

    det = detected_label(row)
    if row.outcome == Outcome.UNKNOWN.value:
        det = _paint(det, "yellow", color)
    else:
        det = _paint(det, "light_green", color)

    lines: List[str] = [
        "",
        f"Path: {_paint(row.path, 'light_green', color)}",
        f"Name: {_paint(row.name, 'light_green', color)}",
        f"Current:  {cur}",
        f"Detected: {det}",
    ]
    return "\n".join(lines)


def print_report(row: ScanRow, silent: bool, only_diff: bool, color: bool) -> None:
    if should_print(row.is_different, silent, only_diff):
        print(format_report(row, color))


# --- csv ------------------------------------------------------------------------


def write_csv(out_path: Path, rows: Iterable[ScanRow]) -> None:
    """Dump one row per visited file; missing extensions are written as empty cells."""
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow([
            "path", "name", "current_ext", "detected_ext", "detected_mime",
            "outcome", "is_different", "action", "new_path", "error", "reason"
        ])
        for r in rows:
            writer.writerow([
                r.path,
                r.name,
                r.current_ext or "",
                r.detected_ext or "",
                r.detected_mime,
                r.outcome,
                str(r.is_different).lower(),
                r.action,
                r.new_path,
                r.error,
                r.reason
            ])
