from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple
import os
import logging

from ..detector import ChromiumDetector, Verdict
from . import bundle as manifest
from .base import BUNDLE_SUFFIX, ApplicationRecord, BaseScanner, Diagnostic, ScanResult
from .disk import directory_size, list_directory

logger = logging.getLogger(__name__)


def display_name(bundle: str) -> str:
    name = os.path.basename(bundle.rstrip(os.sep))
    return name[:-len(BUNDLE_SUFFIX)] if name.endswith(BUNDLE_SUFFIX) else name


class ApplicationScanner(BaseScanner):
    """Finds the Chromium-based bundles in a set of application directories."""

    def __init__(self, detector: ChromiumDetector, max_workers: int = 1, size_max_depth: int = 64):
        self.detector = detector
        self.max_workers = max_workers
        self.size_max_depth = size_max_depth

    def candidates(self, directories: List[str], diagnostics: Optional[List[Diagnostic]] = None) -> List[str]:
        found: List[str] = []
        for directory in directories:
            if not os.path.isdir(directory):
                logger.debug("Skipping missing search directory %s", directory)
                continue
            listing = list_directory(directory)
            if not listing.ok:
                logger.warning("Cannot list %s: %s", directory, listing.error)
                if diagnostics is not None:
                    diagnostics.append(Diagnostic(directory, f"cannot list directory: {listing.error}"))
                continue
            for entry in listing.entries:
                if entry.endswith(BUNDLE_SUFFIX):
                    found.append(os.path.join(directory, entry))
        return found

    def build_record(self, bundle: str, verdict: Verdict, diagnostics: List[Diagnostic]) -> ApplicationRecord:
        size = directory_size(bundle, max_depth=self.size_max_depth)
        if size.skipped:
            logger.debug(f"{bundle}: {size.skipped} entries skipped while measuring size")
            diagnostics.append(Diagnostic(bundle, f"{size.skipped} entries unreadable; size is a lower bound"))
        info = manifest.read_manifest(bundle)
        return ApplicationRecord(
            name=display_name(bundle),
            install_date=manifest.install_date(bundle),
            size_in_bytes=size.total,
            version=manifest.version(bundle, info),
            executable_path=manifest.executable_path(bundle, info),
            bundle_identifier=manifest.bundle_identifier(bundle, info),
            path=bundle,
            detected_by=verdict.signal,
        )

    def _examine(self, bundle: str) -> Tuple[Optional[ApplicationRecord], List[Diagnostic]]:
        diagnostics: List[Diagnostic] = []
        verdict = self.detector.classify(bundle)
        diagnostics.extend(Diagnostic(bundle, e) for e in verdict.errors)
        if not verdict:
            return None, diagnostics
        logger.info("Chromium-based: %s (via %s)", display_name(bundle), verdict.signal)
        return self.build_record(bundle, verdict, diagnostics), diagnostics

    def run(self, directories: List[str]) -> ScanResult:
        result = ScanResult()
        bundles = self.candidates(directories, result.diagnostics)
        total = len(bundles)
        logger.info("Found %d candidate bundles in %d directories", total, len(directories))

        def examine(indexed):
            i, path = indexed
            logger.debug(f"[{i}/{total}] Analyzing {os.path.basename(path)}")
            return self._examine(path)

        work = enumerate(bundles, start=1)
        if self.max_workers > 1 and total > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                outcomes = list(executor.map(examine, work))
        else:
            outcomes = [examine(item) for item in work]

        for record, diagnostics in outcomes:
            result.diagnostics.extend(diagnostics)
            if record is not None:
                result.records.append(record)
        return result
