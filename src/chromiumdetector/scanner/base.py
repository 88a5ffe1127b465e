from typing import List, Optional
from dataclasses import dataclass, field
from datetime import datetime, timezone

UNKNOWN = "Unknown"
BUNDLE_SUFFIX = ".app"

# Reported when the filesystem does not record a creation time.
INSTALL_DATE_UNKNOWN = datetime.fromtimestamp(0, tz=timezone.utc)


@dataclass(frozen=True)
class ApplicationRecord:
    name: str
    install_date: datetime
    size_in_bytes: int
    version: str
    executable_path: str
    bundle_identifier: Optional[str] = None
    path: str = ""
    detected_by: Optional[str] = None   # frameworks | binary | bundle_id


@dataclass
class Listing:
    """Directory entries, or the error that prevented listing them."""
    entries: List[str] = field(default_factory=list)
    error: Optional[OSError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class SizeResult:
    total: int = 0
    skipped: int = 0


@dataclass
class Diagnostic:
    path: str
    message: str


@dataclass
class ScanResult:
    records: List[ApplicationRecord] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def total_size(self) -> int:
        return sum(r.size_in_bytes for r in self.records)


class BaseScanner:
    def run(self, directories: List[str]) -> ScanResult:
        raise NotImplementedError

    def scan(self, directories: List[str]) -> List[ApplicationRecord]:
        return self.run(directories).records
