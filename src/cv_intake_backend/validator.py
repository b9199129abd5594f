"""Upload policy checks over filename and measured size."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from .configuration import UploadPolicy
from .utils import split_extension


class RejectionReason(str, Enum):
    MISSING_FILENAME = "No selected file"
    EXTENSION_NOT_ALLOWED = "File type not allowed"
    FILE_TOO_LARGE = "File size exceeds limit"


def check_extension(filename: str, policy: UploadPolicy) -> Optional[RejectionReason]:
    if not filename:
        return RejectionReason.MISSING_FILENAME
    _, extension = split_extension(filename)
    if extension.lower() not in policy.allowed_extensions:
        return RejectionReason.EXTENSION_NOT_ALLOWED
    return None


def check_size(size: int, policy: UploadPolicy) -> Optional[RejectionReason]:
    if size > policy.max_file_size:
        return RejectionReason.FILE_TOO_LARGE
    return None


def validate(filename: str, size: int, policy: UploadPolicy) -> Optional[RejectionReason]:
    """Return the first reason the upload breaks the policy, or None if it is acceptable."""
    return check_extension(filename, policy) or check_size(size, policy)
