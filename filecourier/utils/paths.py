"""
Path resolution for changed files.

Turns an absolute path reported by the watcher into the routing pair used
for uploads: the folder it sits in below the watched root (the context) and
its file name. Purely lexical: ".." segments are folded textually, symlinks
are not followed and the filesystem is never touched.
"""

import os
from pathlib import PurePath

from filecourier.errors import (
    InvalidEncoding,
    NoFilename,
    NoParent,
    PathLike,
    PathOutsideRoot,
)
from filecourier.models.schemas import RelativeLocation


def resolve(absolute_path: PathLike, watch_root: PathLike) -> RelativeLocation:
    """
    Split ``absolute_path`` into a context and a name relative to ``watch_root``.

    Args:
        absolute_path: Path of the changed file, as reported by the watcher
        watch_root: Canonical watched directory

    Returns:
        RelativeLocation with a POSIX style context ("" directly under root)

    Raises:
        PathOutsideRoot: path is not below the root
        NoParent: path is the root itself
        NoFilename: last segment is not a file name
        InvalidEncoding: context or name cannot be represented as utf-8
    """
    # bytes paths are decoded with surrogateescape so bad bytes survive
    # until the encoding check below; normpath folds inner ".." segments
    path = PurePath(os.path.normpath(os.fsdecode(absolute_path)))
    root = PurePath(os.path.normpath(os.fsdecode(watch_root)))

    try:
        relative = path.relative_to(root)
    except ValueError:
        raise PathOutsideRoot(absolute_path) from None

    if not relative.parts:
        raise NoParent(absolute_path)

    *parents, name = relative.parts

    if name in ('', '.', '..'):
        raise NoFilename(absolute_path)

    context = "/".join(parents)

    for text in (context, name):
        try:
            text.encode('utf-8')
        except UnicodeEncodeError:
            raise InvalidEncoding(absolute_path) from None

    return RelativeLocation(context=context, name=name)
