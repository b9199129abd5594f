"""
Malware scanning adapters.

The pipeline only needs a two-case answer. ``ClamdScanner`` shells out to
``clamdscan`` and treats anything other than a successful run with the clean
marker in its output as INFECTED, so an unavailable or crashing scanner
blocks the upload rather than letting it through.
"""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from .configuration import ScannerConfig
from .models import ScanVerdict

logger = logging.getLogger(__name__)


class BaseScanner(ABC):
    """Contract for all malware scanning adapters."""

    @abstractmethod
    def scan(self, path: Path) -> ScanVerdict:
        """Scan a file on disk without modifying it.

        Args:
            path: Local file to scan.

        Returns:
            ScanVerdict.CLEAN only when the file is known to be clean.
        """


class ClamdScanner(BaseScanner):
    def __init__(self, command: str = "clamdscan", clean_marker: str = "OK", timeout: Optional[float] = None) -> None:
        self.command = command
        self.clean_marker = clean_marker
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: ScannerConfig) -> "ClamdScanner":
        return cls(command=config.command, clean_marker=config.clean_marker, timeout=config.timeout_seconds)

    def scan(self, path: Path) -> ScanVerdict:
        try:
            result = subprocess.run(
                [self.command, str(path)],
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.warning(f"Scan of {path} timed out after {self.timeout}s")
            return ScanVerdict.INFECTED
        except OSError as e:
            logger.warning(f"Error scanning file {path}: {e}")
            return ScanVerdict.INFECTED

        if result.returncode != 0:
            logger.warning(f"Scanner exited with status {result.returncode} for {path}: {result.stdout.strip()}")
            return ScanVerdict.INFECTED

        if self.clean_marker not in result.stdout:
            logger.warning(f"Scanner output for {path} has no clean marker")
            return ScanVerdict.INFECTED

        logger.info(f"Scan clean: {path}")
        return ScanVerdict.CLEAN
