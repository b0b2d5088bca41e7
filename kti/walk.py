# kti/walk.py

from __future__ import annotations
import os
from pathlib import Path
from typing import Callable, Dict, FrozenSet, Iterator, Optional, Tuple

ErrorCb = Callable[[OSError], None]


def is_hidden(name: str) -> bool:
    return name.startswith(".")


def _dir_key(path: str) -> Tuple[int, int]:
    st = os.stat(path)
    return st.st_dev, st.st_ino


def iter_files(
    root: Path,
    max_depth: Optional[int] = None,
    show_hidden: bool = False,
    follow_links: bool = False,
    on_error: Optional[ErrorCb] = None,
) -> Iterator[Path]:
    """Iterate over regular files under a path, recursively if it's a directory.

    The root is depth 0 and is never filtered as hidden. Hidden entries
    (leading dot) and their subtrees are skipped unless ``show_hidden``.
    Symlinked directories are only entered with ``follow_links``. A link back
    to one of its own ancestors is a loop: it is reported and not entered.
    Two links to the same non-ancestor directory are both walked.

    Args:
        root (Path): File or directory to scan.
        max_depth (Optional[int]): Deepest level to visit, None for no limit.
        show_hidden (bool): Include dot-files and dot-directories.
        follow_links (bool): Descend into symlinked directories.
        on_error (Optional[ErrorCb]): Called with errors raised while listing
            directories. Traversal continues afterwards.

    Yields:
        Path: Paths to each file found, sorted per directory.
    """
    if not root.is_dir():
        if root.is_file():
            yield root
        return
    if max_depth is not None and max_depth < 1:
        return

    # dirpath -> (dev, ino) of itself and every directory above it
    ancestors: Dict[str, FrozenSet[Tuple[int, int]]] = {}
    if follow_links:
        ancestors[os.fspath(root)] = frozenset([_dir_key(os.fspath(root))])

    for dirpath, dirnames, filenames in os.walk(root, topdown=True, onerror=on_error, followlinks=follow_links):
        rel = os.path.relpath(dirpath, root)
        depth = 0 if rel == os.curdir else len(Path(rel).parts)

        keep = []
        for name in sorted(dirnames):
            if not show_hidden and is_hidden(name):
                continue
            if max_depth is not None and depth + 1 >= max_depth:
                continue
            full = os.path.join(dirpath, name)
            if follow_links:
                try:
                    key = _dir_key(full)
                except OSError as exc:
                    if on_error:
                        on_error(exc)
                    continue
                chain = ancestors.get(dirpath, frozenset())
                if key in chain:
                    if on_error:
                        on_error(OSError(f"File system loop found: {full}"))
                    continue
                ancestors[full] = chain | {key}
            keep.append(name)
        dirnames[:] = keep

        for name in sorted(filenames):
            if not show_hidden and is_hidden(name):
                continue
            full = Path(dirpath) / name
            if full.is_file():
                yield full
