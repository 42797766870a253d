import os
import shutil
import contextlib
from ..cli_logger import logger
from ..errors import StagingIOError


def ensure_dir(path):
    """Create ``path`` and any missing parents; a no-op when it already exists."""
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        raise StagingIOError(f"Could not create directory {path}: {e}", path=path) from e
    return path


def is_up_to_date(src, dest):
    """rsync's quick check: same size and same modification time."""
    if not os.path.isfile(dest):
        return False
    src_stat = os.stat(src)
    dest_stat = os.stat(dest)
    return (
        src_stat.st_size == dest_stat.st_size
        and int(src_stat.st_mtime) == int(dest_stat.st_mtime)
    )


def sync_file(src, dest_dir):
    """Copy ``src`` into ``dest_dir`` keeping its mtime, like ``rsync -t``.

    The copy goes to a ``.tmp`` sibling first and is renamed over the
    destination, so an interrupted copy never leaves a truncated file behind.
    Returns the destination path and whether anything was written.
    """
    dest = os.path.join(dest_dir, os.path.basename(src))
    try:
        if is_up_to_date(src, dest):
            logger.step_info(f"up to date: {os.path.basename(dest)}", indent=2)
            return dest, False
    except OSError as e:
        raise StagingIOError(f"Could not stat {src}: {e}", path=src) from e

    temp_dest = dest + ".tmp"
    try:
        shutil.copyfile(src, temp_dest)
        shutil.copystat(src, temp_dest)
        # Atomic rename
        os.replace(temp_dest, dest)
    except OSError as e:
        with contextlib.suppress(OSError):
            if os.path.exists(temp_dest):
                os.remove(temp_dest)
        raise StagingIOError(f"Could not copy {src} to {dest}: {e}", path=dest) from e

    logger.step_info(f"copied: {os.path.basename(dest)} -> {dest_dir}", indent=2)
    return dest, True
