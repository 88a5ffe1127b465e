import json
from datetime import datetime
from typing import Any, Dict, List, Optional, TextIO
import sys
from colorama import Fore, Style

from .scanner.base import INSTALL_DATE_UNKNOWN, UNKNOWN, ApplicationRecord, ScanResult

GIB = 1024.0 ** 3

SORT_KEYS = {
    "name": lambda r: r.name.lower(),
    "size": lambda r: -r.size_in_bytes,
    "date": lambda r: r.install_date,
}


def format_size(size_in_bytes: int) -> str:
    return f"{size_in_bytes / GIB:.2f} GB"


def format_date(value: datetime) -> str:
    if value == INSTALL_DATE_UNKNOWN:
        return UNKNOWN
    return value.astimezone().strftime("%b %d, %Y at %H:%M")


def sort_records(records: List[ApplicationRecord], key: Optional[str]) -> List[ApplicationRecord]:
    if not key or key == "none":
        return list(records)
    return sorted(records, key=SORT_KEYS[key])


def record_to_dict(record: ApplicationRecord) -> Dict[str, Any]:
    return {
        "name": record.name,
        "version": record.version,
        "bundle_identifier": record.bundle_identifier,
        "install_date": None if record.install_date == INSTALL_DATE_UNKNOWN else record.install_date.isoformat(),
        "size_in_bytes": record.size_in_bytes,
        "executable_path": record.executable_path,
        "path": record.path,
        "detected_by": record.detected_by,
    }


def records_to_json(result: ScanResult, records: Optional[List[ApplicationRecord]] = None) -> str:
    records = result.records if records is None else records
    return json.dumps({
        "summary": {"total_apps": len(records), "total_size_in_bytes": result.total_size},
        "applications": [record_to_dict(r) for r in records],
        "diagnostics": [{"path": d.path, "message": d.message} for d in result.diagnostics],
    }, indent=2)


class Reporter:
    """Prints scan results as a colored text report."""

    def __init__(self, stream: TextIO = None, quiet: bool = False):
        self.stream = stream or sys.stdout
        self.quiet = quiet

    def _print(self, text: str = ""):
        print(text, file=self.stream)

    def report(self, result: ScanResult, records: Optional[List[ApplicationRecord]] = None):
        records = result.records if records is None else records
        self._print(f"{Fore.CYAN}{Style.BRIGHT}\n[SCAN RESULTS]{Style.RESET_ALL}")
        self._print(f"  {Fore.GREEN}▸ Total Apps Found: {len(records)}{Style.RESET_ALL}")
        self._print(f"  {Fore.BLUE}▸ Total Size: {format_size(result.total_size)}{Style.RESET_ALL}")

        if records and not self.quiet:
            self._print(f"{Fore.CYAN}{Style.BRIGHT}\n[DETAILS]{Style.RESET_ALL}")
            for app in records:
                self._print(f"\n{Fore.MAGENTA}◆ {app.name}{Style.RESET_ALL}")
                self._print(f"  ├─ Version   : {app.version}")
                self._print(f"  ├─ Bundle ID : {app.bundle_identifier or UNKNOWN}")
                self._print(f"  ├─ Installed : {format_date(app.install_date)}")
                self._print(f"  ├─ Size      : {format_size(app.size_in_bytes)}")
                self._print(f"  ├─ Detected  : {app.detected_by}")
                self._print(f"  └─ Executable: {app.executable_path}")

        if result.diagnostics and not self.quiet:
            self._print(f"\n{Fore.YELLOW}[WARN]{Style.RESET_ALL} {len(result.diagnostics)} issues during scan:")
            for d in result.diagnostics:
                self._print(f"  • {d.path}: {d.message}")

        self._print(f"\n{Fore.GREEN}[✓]{Style.RESET_ALL} Scan completed\n")
