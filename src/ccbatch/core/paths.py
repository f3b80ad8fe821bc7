# SPDX-License-Identifier: Apache-2.0
"""Path helpers shared by the reconciler and the pending index.

All helpers are purely lexical and never touch the filesystem: paths
handed to the reconciler may name files that were already deleted or
renamed on disk.
"""

import os
from pathlib import Path
from typing import Iterable, Iterator, List, Union

PathLike = Union[str, "os.PathLike[str]"]


def canonical(path: PathLike) -> Path:
    """Normalise separators and collapse ``.``/``..`` segments."""
    text = os.fspath(path).replace("\\", "/")
    return Path(os.path.normpath(text))


def ancestors(path: PathLike) -> Iterator[Path]:
    """Yield the parents of *path*, innermost first.

    The filesystem root (or the anchor of a relative path) is not yielded.
    """
    current = canonical(path)
    parent = current.parent
    while parent != current and parent != Path(parent.anchor or "."):
        yield parent
        current, parent = parent, parent.parent


def is_under(path: PathLike, folder: PathLike) -> bool:
    """True if *path* is *folder* itself or lies somewhere beneath it."""
    p = canonical(path)
    f = canonical(folder)
    return p == f or f in p.parents


def depth(path: PathLike) -> int:
    return len(canonical(path).parts)


def sort_outermost_first(paths: Iterable[PathLike]) -> List[Path]:
    """Sort paths so that every parent comes before its children.

    Ties at the same depth are broken by the path string so the order is
    stable across runs.
    """
    return sorted((canonical(p) for p in paths), key=lambda p: (depth(p), str(p)))


def rebase(path: PathLike, old_folder: PathLike, new_folder: PathLike) -> Path:
    """Move *path* from under *old_folder* to the same place under *new_folder*.

    Paths outside *old_folder* come back unchanged.
    """
    p = canonical(path)
    old = canonical(old_folder)
    if not is_under(p, old):
        return p
    return canonical(new_folder) / p.relative_to(old)
