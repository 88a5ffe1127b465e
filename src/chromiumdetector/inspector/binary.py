import os
import shutil
import logging
import threading
from typing import Optional, Tuple

from ..config import ConfigError, DetectionRules, InspectorConfig
from .base import BaseLister, InspectionError
from .macho import MachOLister
from .otool import OtoolLister

logger = logging.getLogger(__name__)


class BinaryInspector:
    """Searches an executable's linked-library listing for Chromium runtimes."""

    def __init__(self, lister: BaseLister, rules: Optional[DetectionRules] = None, max_concurrent: int = 4):
        self.lister = lister
        self.rules = rules or DetectionRules()
        self._slots = threading.BoundedSemaphore(max_concurrent)

    def matches(self, text: str) -> Optional[str]:
        for name in self.rules.frameworks:
            if name in text:
                return name
        for pattern in self.rules.binary_patterns:
            if pattern in text:
                return pattern
        return None

    def check(self, executable: str) -> Tuple[bool, Optional[str]]:
        """Inspect an executable; return the verdict and any failure message."""
        with self._slots:
            try:
                text = self.lister.list_dependencies(executable)
            except InspectionError as e:
                logger.warning("Binary inspection failed for %s: %s", executable, e)
                return False, str(e)
        hit = self.matches(text)
        if hit:
            logger.debug(f"[BINARY MATCH] {executable} links '{hit}'")
        return hit is not None, None

    def inspect(self, executable: str) -> bool:
        return self.check(executable)[0]


def _resolve_tool(tool: str) -> Optional[str]:
    if os.path.isabs(tool):
        return tool if os.access(tool, os.X_OK) else None
    return shutil.which(tool)


def make_lister(config: InspectorConfig) -> BaseLister:
    """Pick the dependency lister once, at startup."""
    if config.backend == "macho":
        return MachOLister()

    tool = _resolve_tool(config.tool)
    if tool:
        return OtoolLister(tool, timeout=config.timeout_seconds)
    if config.backend == "otool":
        raise ConfigError(f"dependency lister '{config.tool}' not found")
    logger.info("'%s' not found; reading Mach-O load commands directly", config.tool)
    return MachOLister()
