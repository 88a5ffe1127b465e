"""Reads dylib dependencies from a Mach-O executable without spawning otool.

Thin and universal (fat) binaries are both handled by ``macholib``; the
install names of every slice are merged in load-command order.
"""
import struct
import logging
from typing import List

from macholib.MachO import MachO

from .base import BaseLister, InspectionError

logger = logging.getLogger(__name__)


class MachOError(InspectionError):
    pass


def dylib_names(executable: str) -> List[str]:
    """Return the linked dylib install names recorded in a Mach-O file."""
    try:
        macho = MachO(executable)
    except (OSError, ValueError, EOFError, struct.error) as e:
        raise MachOError(f"cannot parse {executable}: {e}")

    names: List[str] = []
    for header in macho.headers:
        for _, _, name in header.walkRelocatables():
            if name not in names:
                names.append(name)
    return names


class MachOLister(BaseLister):
    """Lists linked libraries by reading the executable's load commands."""

    def list_dependencies(self, executable: str) -> str:
        names = dylib_names(executable)
        logger.debug(f"[MACHO] {executable}: {len(names)} dylibs")
        return "\n".join(names)
