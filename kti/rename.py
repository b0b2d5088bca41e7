# kti/rename.py

from __future__ import annotations
from pathlib import Path


def target_path(path: Path, new_ext_no_dot: str) -> Path:
    """Return ``path`` with its last extension replaced by (or extended with) the new one."""
    if path.suffix:
        return path.with_name(f"{path.stem}.{new_ext_no_dot}")
    return path.with_name(f"{path.name}.{new_ext_no_dot}")


def safe_rename(path: Path, new_ext_no_dot: str) -> Path | None | OSError:
    """Rename a file to carry the given extension, never overwriting.

    Returns the new Path if renamed, `None` if the file already has that
    extension, or the caught OSError if the rename failed. An existing file
    at the target path is reported as `FileExistsError` and nothing moves.

    Args:
        path (Path): Path to the file to rename.
        new_ext_no_dot (str): New extension without the leading dot.

    Returns:
        Path | None | OSError: Result of the rename operation.
    """
    if path.suffix[1:] == new_ext_no_dot:
        return None

    candidate = target_path(path, new_ext_no_dot)
    try:
        # case-insensitive file systems report the source itself for photo.JPG -> photo.jpg
        if candidate.is_symlink() or (candidate.exists() and not candidate.samefile(path)):
            raise FileExistsError(f"Target already exists: {candidate}")
        path.rename(candidate)
        return candidate
    except OSError as exc:
        return exc
