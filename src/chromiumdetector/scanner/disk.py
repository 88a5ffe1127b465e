import os
import stat
import logging
from typing import List

from .base import Listing, SizeResult

logger = logging.getLogger(__name__)


def list_directory(path: str) -> Listing:
    """List one directory level. A missing directory is an empty listing."""
    try:
        return Listing(entries=os.listdir(path))
    except FileNotFoundError:
        return Listing()
    except OSError as e:
        return Listing(error=e)


def directory_size(root: str, max_depth: int = 64) -> SizeResult:
    """Sum the sizes of regular files below root.

    Symlinks are never followed, so a link pointing back at an ancestor cannot
    loop the walk. Entries that disappear or cannot be stat'ed mid-walk are
    counted in ``skipped`` and the walk carries on.
    """
    result = SizeResult()
    errors: List[OSError] = []
    base_depth = root.rstrip(os.sep).count(os.sep)

    for dirpath, dirnames, filenames in os.walk(root, followlinks=False, onerror=errors.append):
        if dirpath.count(os.sep) - base_depth >= max_depth:
            dirnames[:] = []
        for name in filenames:
            try:
                st = os.lstat(os.path.join(dirpath, name))
            except OSError:
                result.skipped += 1
                continue
            if stat.S_ISREG(st.st_mode):
                result.total += st.st_size

    for e in errors:
        logger.debug(f"Size walk could not read {e.filename}: {e.strerror}")
    result.skipped += len(errors)
    return result
