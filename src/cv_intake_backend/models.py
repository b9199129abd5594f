from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, List

from pydantic import BaseModel


class ScanVerdict(str, Enum):
    # Fail-closed: a scanner that errors out reports INFECTED.
    CLEAN = "clean"
    INFECTED = "infected"


@dataclass
class UploadRequest:
    submitter_id: str
    first_name: str
    last_name: str
    filename: str
    stream: BinaryIO


@dataclass(frozen=True)
class StoredArtifact:
    key: str
    url: str


class UploadResult(BaseModel):
    file_url: str
    file_path: str
    token: str


class ErrorResponse(BaseModel):
    error: str


class PolicyMetadata(BaseModel):
    allowed_extensions: List[str]
    max_file_size: int
