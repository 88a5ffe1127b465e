"""Info.plist accessors for an application bundle.

Every accessor tolerates a missing or broken manifest and degrades to the
``"Unknown"`` sentinel (or ``None`` for the identifier) instead of raising.
"""
import os
import plistlib
import logging
from xml.parsers.expat import ExpatError
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .base import INSTALL_DATE_UNKNOWN, UNKNOWN

logger = logging.getLogger(__name__)

MANIFEST_PATH = os.path.join("Contents", "Info.plist")
EXECUTABLE_DIR = os.path.join("Contents", "MacOS")


def read_manifest(bundle: str) -> Dict[str, Any]:
    path = os.path.join(bundle, MANIFEST_PATH)
    try:
        with open(path, "rb") as f:
            data = plistlib.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, plistlib.InvalidFileException, ExpatError, ValueError) as e:
        logger.debug(f"Unreadable manifest {path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.debug(f"Manifest {path} is not a dictionary")
        return {}
    return data


def _string(manifest: Dict[str, Any], key: str) -> Optional[str]:
    value = manifest.get(key)
    return value if isinstance(value, str) and value else None


def version(bundle: str, manifest: Optional[Dict[str, Any]] = None) -> str:
    if manifest is None:
        manifest = read_manifest(bundle)
    return (
        _string(manifest, "CFBundleShortVersionString")
        or _string(manifest, "CFBundleVersion")
        or UNKNOWN
    )


def bundle_identifier(bundle: str, manifest: Optional[Dict[str, Any]] = None) -> Optional[str]:
    if manifest is None:
        manifest = read_manifest(bundle)
    return _string(manifest, "CFBundleIdentifier")


def executable_path(bundle: str, manifest: Optional[Dict[str, Any]] = None) -> str:
    if manifest is None:
        manifest = read_manifest(bundle)
    name = _string(manifest, "CFBundleExecutable")
    if not name:
        return UNKNOWN
    return os.path.join(bundle, EXECUTABLE_DIR, name)


def install_date(bundle: str) -> datetime:
    """Creation time of the bundle, or the epoch sentinel when unavailable."""
    try:
        st = os.stat(bundle)
    except OSError:
        return INSTALL_DATE_UNKNOWN
    born = getattr(st, "st_birthtime", None)
    if born is None:
        return INSTALL_DATE_UNKNOWN
    return datetime.fromtimestamp(born, tz=timezone.utc)
