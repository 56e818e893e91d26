"""
Atomic file writes shared by the key store and the license repository.
"""

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Optional, Union

from core.domain.exceptions import StorageError

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def atomic_write(path: PathLike, data: bytes, mode: Optional[int] = None) -> Path:
    """
    Write ``data`` to ``path`` so readers never see a partial file.

    The content goes to a temporary file in the target directory which
    then replaces ``path``. Missing parent directories are created.

    Args:
        path: Destination file
        data: Bytes to write
        mode: Permission bits for the new file; by default those of the
            file being replaced, or 0o666 less the umask for a new one

    Returns:
        Resolved destination path

    Raises:
        StorageError: If the directory or file cannot be written
    """
    target = Path(path).expanduser()
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", dir=target.parent)
    except OSError as e:
        raise StorageError(f"Cannot write {target}: {e.strerror or e}") from e

    try:
        with os.fdopen(fd, "wb") as tmp:
            tmp.write(data)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.chmod(tmp_name, mode if mode is not None else _default_mode(target))
        os.replace(tmp_name, target)
    except OSError as e:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise StorageError(f"Cannot write {target}: {e.strerror or e}") from e

    logger.debug("Wrote %d bytes to %s", len(data), target)
    return target


def _default_mode(target: Path) -> int:
    """Mode of the file being replaced, else 0o666 less the umask."""
    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def read_bytes(path: PathLike) -> bytes:
    """
    Read a whole file.

    Raises:
        StorageError: If the file is missing or unreadable
    """
    target = Path(path).expanduser()
    try:
        return target.read_bytes()
    except OSError as e:
        raise StorageError(f"Cannot read {target}: {e.strerror or e}") from e
