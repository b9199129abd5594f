from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from .configuration import ConverterConfig
from .exceptions import ConversionError

logger = logging.getLogger(__name__)


class BaseConverter(ABC):
    """Contract for document-to-PDF conversion adapters."""

    @abstractmethod
    def convert(self, path: Path) -> Path:
        """Convert a document to a sibling PDF.

        Args:
            path: Local non-PDF document.

        Returns:
            Path to the generated ``.pdf`` in the same directory. The source
            document is removed on success.

        Raises:
            ConversionError: if conversion fails; the source is left in place.
        """


class LibreOfficeConverter(BaseConverter):
    """Runs ``libreoffice --headless --convert-to pdf`` against a single file."""

    def __init__(self, command: str = "libreoffice", timeout: Optional[float] = None) -> None:
        self.command = command
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: ConverterConfig) -> "LibreOfficeConverter":
        return cls(command=config.command, timeout=config.timeout_seconds)

    def convert(self, path: Path) -> Path:
        output_path = path.with_suffix(".pdf")
        args = [self.command, "--headless", "--convert-to", "pdf", str(path), "--outdir", str(path.parent)]

        logger.info(f"Converting {path.name} to PDF")
        try:
            result = subprocess.run(args, capture_output=True, text=True, timeout=self.timeout, check=False)
        except subprocess.TimeoutExpired as exc:
            raise ConversionError(f"Conversion of {path.name} timed out after {self.timeout}s") from exc
        except OSError as exc:
            raise ConversionError(f"Could not run {self.command}: {exc}") from exc

        if result.returncode != 0:
            raise ConversionError(f"{self.command} exited with status {result.returncode}: {result.stderr.strip()}")
        if not output_path.exists():
            raise ConversionError(f"{self.command} did not produce {output_path.name}")

        path.unlink(missing_ok=True)
        logger.info(f"Converted {path.name} -> {output_path.name}")
        return output_path
