"""Private file and directory helpers.

Everything the driver writes is owner-only, including any parent
directories it has to create on the way.
"""

from __future__ import annotations

import errno
import os
from pathlib import Path


def makedirs_private(path: Path, mode: int) -> None:
    """Create path and every missing ancestor with exactly mode.

    Directories that already exist are left as they are.

    Raises:
        OSError: A directory could not be created, or path is not a directory
    """
    missing: list[Path] = []
    current = path
    while not current.exists():
        missing.append(current)
        current = current.parent

    for directory in reversed(missing):
        try:
            directory.mkdir(mode=mode)
        except FileExistsError:
            if not directory.is_dir():
                raise
            continue
        # mkdir's mode is masked by umask
        directory.chmod(mode)

    if not path.is_dir():
        raise NotADirectoryError(errno.ENOTDIR, os.strerror(errno.ENOTDIR), str(path))


def write_private(path: Path, content: str, mode: int) -> None:
    """Write content to path, creating or truncating it with exactly mode."""
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, mode)
    with os.fdopen(fd, "w") as f:
        # O_CREAT's mode is masked by umask and ignored for existing files
        os.fchmod(f.fileno(), mode)
        f.write(content)
