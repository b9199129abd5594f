"""
Upload processing pipeline.

This module runs a single untrusted upload through every stage in order:
- Required field and file type checks (before any file I/O)
- Persisting the stream to a per-request scratch directory
- Size check on the bytes actually written
- Malware scan
- Conversion to PDF for non-PDF documents
- Storage in the object store
- Integrity token issuance

The first failing stage ends the run with an UploadError subclass. The
scratch directory is removed on every exit path.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from .configuration import ScratchConfig, ServiceConfig, UploadPolicy
from .converter import BaseConverter, LibreOfficeConverter
from .exceptions import (
    ClientInputError,
    ConversionError,
    ConversionFailure,
    SecurityRejection,
    StorageFailure,
    StoreError,
)
from .models import ScanVerdict, UploadRequest, UploadResult
from .s3_service import BaseUploader, S3Uploader
from .scanner import BaseScanner, ClamdScanner
from .token_issuer import TokenIssuer
from .utils import build_scratch_filename
from .validator import check_extension, check_size

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "User UUID, First Name, and Last Name are required"
INFECTED_MESSAGE = "File might be infected"
CONVERSION_FAILED_MESSAGE = "Failed to convert file to PDF"
UPLOAD_FAILED_MESSAGE = "Failed to upload file to S3"


class UploadPipeline:
    """
    Runs the validate, scan, convert, store and sign sequence for one upload at a time.

    The pipeline holds no per-request state, so one instance can serve
    concurrent requests; each call to ``process`` gets its own scratch
    directory.

    Attributes:
        policy: Allow-list and size ceiling
        scratch: Scratch directory prefix and filename timestamp format
        scratch_root: Parent for scratch directories (default: system temp dir)
    """

    def __init__(
        self,
        policy: UploadPolicy,
        scanner: BaseScanner,
        converter: BaseConverter,
        uploader: BaseUploader,
        token_issuer: TokenIssuer,
        scratch: ScratchConfig | None = None,
        scratch_root: Path | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.policy = policy
        self.scanner = scanner
        self.converter = converter
        self.uploader = uploader
        self.token_issuer = token_issuer
        self.scratch = scratch or ScratchConfig(prefix="upload", timestamp_format="%Y-%m-%d-%H-%M-%S")
        self.scratch_root = scratch_root
        self._clock = clock

    def process(self, request: UploadRequest) -> UploadResult:
        """
        Process one upload from raw stream to signed reference.

        Args:
            request: Submitter fields and the uploaded stream

        Returns:
            UploadResult with the public URL, the final local path and the token

        Raises:
            ClientInputError: missing fields, empty filename, disallowed type or oversize file
            SecurityRejection: the scanner did not report the file as clean
            ConversionFailure: a non-PDF document could not be converted
            StorageFailure: the object store rejected the file
        """
        if not all(value and value.strip() for value in (request.submitter_id, request.first_name, request.last_name)):
            raise ClientInputError(MISSING_FIELDS_MESSAGE)

        reason = check_extension(request.filename, self.policy)
        if reason is not None:
            logger.info(f"Rejected upload {request.filename!r}: {reason.value}")
            raise ClientInputError(reason.value)

        scratch_dir = Path(tempfile.mkdtemp(prefix=self.scratch.prefix, dir=self.scratch_root))
        try:
            return self._process_in(scratch_dir, request)
        finally:
            shutil.rmtree(scratch_dir, ignore_errors=True)

    def _process_in(self, scratch_dir: Path, request: UploadRequest) -> UploadResult:
        file_path = scratch_dir / build_scratch_filename(
            request.first_name,
            request.last_name,
            request.filename,
            self._clock(),
            self.scratch.timestamp_format,
        )
        with file_path.open("wb") as buffer:
            shutil.copyfileobj(request.stream, buffer)

        size = file_path.stat().st_size
        reason = check_size(size, self.policy)
        if reason is not None:
            logger.info(f"Rejected upload {file_path.name}: {size} bytes exceeds {self.policy.max_file_size}")
            raise ClientInputError(reason.value)

        if self.scanner.scan(file_path) is not ScanVerdict.CLEAN:
            logger.warning(f"Rejected upload {file_path.name}: scan not clean")
            raise SecurityRejection(INFECTED_MESSAGE)

        if file_path.suffix.lower() != ".pdf":
            try:
                file_path = self.converter.convert(file_path)
            except ConversionError as exc:
                logger.error(f"Conversion failed for {file_path.name}: {exc}")
                raise ConversionFailure(CONVERSION_FAILED_MESSAGE) from exc

        try:
            artifact = self.uploader.upload(file_path)
        except StoreError as exc:
            logger.error(f"Upload failed for {file_path.name}: {exc}")
            raise StorageFailure(UPLOAD_FAILED_MESSAGE) from exc

        token = self.token_issuer.issue(request.submitter_id, str(file_path), artifact.url)
        logger.info(f"Stored upload for {request.submitter_id} at {artifact.url}")
        return UploadResult(file_url=artifact.url, file_path=str(file_path), token=token)


def build_pipeline(config: ServiceConfig, scratch_root: Optional[Path] = None) -> UploadPipeline:
    """Wire the production adapters from the service configuration."""
    return UploadPipeline(
        policy=config.policy,
        scanner=ClamdScanner.from_config(config.scanner),
        converter=LibreOfficeConverter.from_config(config.converter),
        uploader=S3Uploader.from_config(config.storage),
        token_issuer=TokenIssuer(config.token_secret),
        scratch=config.scratch,
        scratch_root=scratch_root,
    )
