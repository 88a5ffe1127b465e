import subprocess
import logging

from .base import BaseLister, InspectionError

logger = logging.getLogger(__name__)


class OtoolLister(BaseLister):
    """Lists linked libraries by running ``<tool> -L <executable>``."""

    def __init__(self, tool: str = "otool", timeout: float = 30.0):
        self.tool = tool
        self.timeout = timeout

    def list_dependencies(self, executable: str) -> str:
        try:
            result = subprocess.run(
                [self.tool, "-L", executable],
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired:
            raise InspectionError(f"{self.tool} timed out after {self.timeout:g}s on {executable}")
        except subprocess.CalledProcessError as e:
            raise InspectionError(f"{self.tool} exited with status {e.returncode} on {executable}")
        except OSError as e:
            raise InspectionError(f"cannot run {self.tool}: {e}")
        logger.debug(f"[OTOOL] {executable}: {len(result.stdout.splitlines())} lines")
        return result.stdout
