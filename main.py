# main.py

"""
Orchestrator: read params (JSON + CLI), walk files, detect types, report, rename mismatches.
"""
from __future__ import annotations
import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from kti.model import Options, Outcome, ScanRow, ScanTotals
from kti.walk import iter_files
from kti.signatures import detect_filetype
from kti.policy import current_extension, mismatch
from kti.report import print_report, write_csv
from kti.rename import safe_rename


def load_config(path: Path | None) -> Dict[str, Any]:
    """Read the JSON config; anything unreadable or not an object becomes an empty dict."""
    if not path:
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            cfg = json.load(f)
    except (OSError, ValueError) as exc:
        print(f"[WARN] Failed to read config {path}: {exc}", file=sys.stderr)
        return {}
    if not isinstance(cfg, dict):
        print(f"[WARN] Ignoring config {path}: expected a JSON object", file=sys.stderr)
        return {}
    return cfg


def _non_negative_int(value: str) -> int:
    n = int(value)
    if n < 0:
        raise argparse.ArgumentTypeError(f"expected a non-negative integer, got {value}")
    return n


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Flags mirror the config keys; booleans only ever switch a config value on."""
    p = argparse.ArgumentParser(
        prog="kti",
        description="A simple tool to correct file extensions to match their file signatures.",
    )
    p.add_argument("path", nargs="?", help="File or directory to scan (default: current directory).")
    p.add_argument("-a", "--show-hidden", action="store_true", help="Do not ignore hidden files.")
    p.add_argument("-m", "--max-depth", type=_non_negative_int, metavar="INTEGER", help="Sets max depth to reach.")
    p.add_argument("-d", "--only-diff", action="store_true", help="Only print files with different extensions.")
    p.add_argument("-s", "--silent", action="store_true", help="Do not print per-file reports.")
    p.add_argument("-L", "--follow-links", action="store_true", help="Follow symbolic links.")
    p.add_argument("--dry-run", action="store_true", help="Report differences without renaming files.")
    p.add_argument("-c", "--color", action="store_true", help="Add colors to the output.")
    p.add_argument("--report", type=str, help="Optional path to a CSV report.")
    p.add_argument("--config", type=str, help="Optional JSON config (flags override).")
    return p.parse_args(argv)


def _config_max_depth(cfg: Dict[str, Any]) -> Optional[int]:
    value = cfg.get("max_depth")
    if value is None:
        return None
    try:
        if isinstance(value, bool):
            raise ValueError(value)
        return _non_negative_int(str(value))
    except (ValueError, argparse.ArgumentTypeError):
        print(f"[WARN] Ignoring max_depth={value!r} from config: expected a non-negative integer", file=sys.stderr)
        return None


def _config_for(args: argparse.Namespace) -> Dict[str, Any]:
    """An explicit --config must exist; params.json beside main.py is picked up silently."""
    if args.config:
        explicit = Path(args.config)
        if not explicit.exists():
            print(f"[WARN] Config not found: {explicit}", file=sys.stderr)
            return {}
        return load_config(explicit)
    default = Path(__file__).with_name("params.json")
    return load_config(default if default.exists() else None)


def _resolve_options(args: argparse.Namespace, cfg: Dict[str, Any]) -> Options:
    """Merge CLI flags over config values and validate the root path."""
    max_depth = args.max_depth if args.max_depth is not None else _config_max_depth(cfg)
    opts = Options(
        path=args.path or cfg.get("path") or ".",
        show_hidden=bool(args.show_hidden or cfg.get("show_hidden", False)),
        max_depth=max_depth,
        only_diff=bool(args.only_diff or cfg.get("only_diff", False)),
        silent=bool(args.silent or cfg.get("silent", False)),
        follow_links=bool(args.follow_links or cfg.get("follow_links", False)),
        dry_run=bool(args.dry_run or cfg.get("dry_run", False)),
        color=bool(args.color or cfg.get("color", False)),
        report=args.report or cfg.get("report"),
    )
    if not Path(opts.path).exists():
        print(f"[ERR] Path does not exist: {opts.path}", file=sys.stderr)
        raise SystemExit(2)
    return opts


def _rename(fp: Path, row: ScanRow, totals: ScanTotals) -> None:
    """Move a mismatched file to its detected extension, recording the outcome on the row."""
    new_path = safe_rename(fp, row.detected_ext or "")
    if isinstance(new_path, Exception):
        print("Could not rename file.", file=sys.stderr)
        print(new_path, file=sys.stderr)
        row.action = "error"
        row.error = f"{type(new_path).__name__}: {new_path}"
        totals.errors += 1
    elif new_path is not None:
        print(f"{fp} -> {new_path}")
        row.action = "rename"
        row.new_path = str(new_path)
        totals.renamed += 1


def process_file(fp: Path, opts: Options, totals: ScanTotals) -> ScanRow:
    """Detect, compare, report and (unless dry-run) rename a single file."""
    totals.files += 1
    try:
        det = detect_filetype(fp)
        current_ext = current_extension(fp)
        different = mismatch(current_ext, det)

        if det.outcome is Outcome.READ_ERROR:
            totals.errors += 1
        if different:
            totals.differences += 1

        row = ScanRow(
            path=str(fp),
            name=fp.name,
            current_ext=current_ext,
            detected_ext=det.ext,
            detected_mime=det.mime,
            outcome=det.outcome.value,
            is_different=different,
            action="none",
            new_path="",
            error=det.error,
            reason=det.reason,
        )
        print_report(row, opts.silent, opts.only_diff, opts.color)

        if different:
            if opts.dry_run:
                row.action = "dry-run"
            else:
                _rename(fp, row, totals)
    except Exception as exc:
        totals.errors += 1
        print(f"[ERR] {fp}: {type(exc).__name__}: {exc}", file=sys.stderr)
        row = ScanRow(
            path=str(fp),
            name=fp.name,
            current_ext=current_extension(fp),
            detected_ext=None,
            detected_mime="",
            outcome=Outcome.READ_ERROR.value,
            is_different=False,
            action="error",
            new_path="",
            error=f"{type(exc).__name__}: {exc}",
            reason="exception",
        )

    return row


def _print_summary(opts: Options, totals: ScanTotals) -> None:
    """Print summary information to stdout."""
    print(f"Differences found: {totals.differences}")
    print(
        f"[INFO] Done. Files: {totals.files} | Differences: {totals.differences}"
        f" | Renamed: {totals.renamed} | Errors: {totals.errors}"
    )
    if opts.report:
        print(f"[INFO] Report: {Path(opts.report).resolve()}")
    if opts.dry_run:
        print("[INFO] Dry run: no files were renamed.")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one scan and return the exit code: 3 on any error, 2 when a dry run
    found differences, 0 otherwise."""
    args = parse_args(argv)
    cfg = _config_for(args)
    opts = _resolve_options(args, cfg)

    rows: List[ScanRow] = []
    totals = ScanTotals()

    def on_walk_error(exc: OSError) -> None:
        totals.errors += 1
        print(f"Error reading entry: {exc}", file=sys.stderr)

    files = iter_files(
        Path(opts.path),
        max_depth=opts.max_depth,
        show_hidden=opts.show_hidden,
        follow_links=opts.follow_links,
        on_error=on_walk_error,
    )
    for fp in files:
        rows.append(process_file(fp, opts, totals))

    if opts.report:
        write_csv(Path(opts.report), rows)
    _print_summary(opts, totals)

    if totals.errors:
        return 3
    if totals.differences and opts.dry_run:
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
