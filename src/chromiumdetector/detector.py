from dataclasses import dataclass, field
from typing import List, Optional
import os
import logging

from .config import DetectionRules
from .inspector.binary import BinaryInspector
from .scanner import bundle as manifest
from .scanner.base import UNKNOWN
from .scanner.disk import list_directory

logger = logging.getLogger(__name__)

FRAMEWORKS_DIR = os.path.join("Contents", "Frameworks")

SIGNAL_FRAMEWORKS = "frameworks"
SIGNAL_BINARY = "binary"
SIGNAL_BUNDLE_ID = "bundle_id"


@dataclass
class Verdict:
    positive: bool
    signal: Optional[str] = None
    errors: List[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.positive


def has_known_framework(bundle: str, frameworks, errors: Optional[List[str]] = None) -> bool:
    """True if any embedded framework entry contains a known framework name."""
    path = os.path.join(bundle, FRAMEWORKS_DIR)
    listing = list_directory(path)
    if not listing.ok:
        logger.warning("Cannot list frameworks in %s: %s", path, listing.error)
        if errors is not None:
            errors.append(f"cannot list frameworks: {listing.error}")
        return False
    for entry in listing.entries:
        for name in frameworks:
            if name in entry:
                logger.debug(f"[FRAMEWORK MATCH] {bundle}: '{entry}' contains '{name}'")
                return True
    return False


def matches_bundle_id(identifier: Optional[str], prefixes) -> bool:
    if not identifier:
        return False
    return any(p in identifier for p in prefixes)


class ChromiumDetector:
    """Decides whether a bundle embeds a Chromium-derived runtime.

    Signals run cheapest-and-most-precise first and stop at the first hit:
    the Frameworks directory, then the main executable's linked libraries,
    then the bundle identifier.
    """

    def __init__(self, rules: Optional[DetectionRules] = None, inspector: Optional[BinaryInspector] = None):
        self.rules = rules or DetectionRules()
        self.inspector = inspector

    def classify(self, bundle: str) -> Verdict:
        errors: List[str] = []
        if has_known_framework(bundle, self.rules.frameworks, errors):
            return Verdict(True, SIGNAL_FRAMEWORKS)

        info = manifest.read_manifest(bundle)

        if self.inspector is not None:
            executable = manifest.executable_path(bundle, info)
            if executable != UNKNOWN and os.path.exists(executable):
                positive, error = self.inspector.check(executable)
                if positive:
                    return Verdict(True, SIGNAL_BINARY, errors)
                if error:
                    errors.append(error)

        if matches_bundle_id(manifest.bundle_identifier(bundle, info), self.rules.bundle_id_prefixes):
            return Verdict(True, SIGNAL_BUNDLE_ID, errors)

        return Verdict(False, None, errors)

    def is_chromium_based(self, bundle: str) -> bool:
        return self.classify(bundle).positive
