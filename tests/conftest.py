"""
Pytest configuration and fixtures for CV Intake Backend tests.
"""

import os
from datetime import datetime
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing the app
os.environ["DO_SPACES_ENDPOINT"] = "https://fra1.digitaloceanspaces.com"
os.environ["DO_SPACES_REGION"] = "fra1"
os.environ["DO_SPACES_ACCESS_KEY"] = "test-access-key"
os.environ["DO_SPACES_SECRET_KEY"] = "test-secret-key"
os.environ["DO_SPACES_BUCKET_NAME"] = "cv-uploads"
os.environ["DO_SECRET_KEY_DO_FUNCTIONS"] = "test-signing-secret"

from cv_intake_backend.configuration import UploadPolicy
from cv_intake_backend.converter import BaseConverter
from cv_intake_backend.exceptions import ConversionError, StoreError
from cv_intake_backend.main import app, get_pipeline
from cv_intake_backend.models import ScanVerdict, StoredArtifact
from cv_intake_backend.pipeline import UploadPipeline
from cv_intake_backend.s3_service import BaseUploader
from cv_intake_backend.scanner import BaseScanner
from cv_intake_backend.token_issuer import TokenIssuer

TEST_SECRET = "test-signing-secret"
TEST_ENDPOINT = "https://fra1.digitaloceanspaces.com"
TEST_BUCKET = "cv-uploads"
FIXED_NOW = datetime(2024, 5, 17, 9, 30, 15)

POLICY = UploadPolicy(
    max_file_size=int(1.5 * 1024 * 1024),
    allowed_extensions=(".pdf", ".doc", ".docx", ".odt", ".rtf", ".wps", ".wpd"),
)


class FakeScanner(BaseScanner):
    """Returns a fixed verdict and records every path it was asked to scan."""

    def __init__(self, verdict: ScanVerdict = ScanVerdict.CLEAN):
        self.verdict = verdict
        self.scanned: list[Path] = []

    def scan(self, path: Path) -> ScanVerdict:
        assert path.exists(), "scanner must see the persisted file"
        self.scanned.append(path)
        return self.verdict


class FakeConverter(BaseConverter):
    """Writes a placeholder sibling PDF, or fails like a crashed LibreOffice."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: list[Path] = []

    def convert(self, path: Path) -> Path:
        self.calls.append(path)
        if self.fail:
            raise ConversionError("soffice exited with status 1")
        output = path.with_suffix(".pdf")
        output.write_bytes(b"%PDF-1.4\n% converted\n%%EOF")
        path.unlink()
        return output


class FakeUploader(BaseUploader):
    """Keeps uploaded bytes in memory, keyed like the S3 adapter."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: list[Path] = []
        self.objects: dict[str, bytes] = {}

    def upload(self, path: Path) -> StoredArtifact:
        self.calls.append(path)
        if self.fail:
            raise StoreError("AccessDenied")
        self.objects[path.name] = path.read_bytes()
        return StoredArtifact(key=path.name, url=f"{TEST_ENDPOINT}/{TEST_BUCKET}/{path.name}")


@pytest.fixture
def scratch_root(tmp_path):
    """Parent directory for per-request scratch directories."""
    root = tmp_path / "scratch"
    root.mkdir()
    return root


@pytest.fixture
def scanner():
    return FakeScanner()


@pytest.fixture
def converter():
    return FakeConverter()


@pytest.fixture
def uploader():
    return FakeUploader()


@pytest.fixture
def make_pipeline(scratch_root, scanner, converter, uploader):
    """Build a pipeline around the fakes; keyword arguments replace any collaborator."""

    def _make(**overrides) -> UploadPipeline:
        kwargs = dict(
            policy=POLICY,
            scanner=scanner,
            converter=converter,
            uploader=uploader,
            token_issuer=TokenIssuer(TEST_SECRET),
            scratch_root=scratch_root,
            clock=lambda: FIXED_NOW,
        )
        kwargs.update(overrides)
        return UploadPipeline(**kwargs)

    return _make


@pytest.fixture
def pipeline(make_pipeline):
    return make_pipeline()


@pytest.fixture
def client(pipeline):
    """Create a test client whose /upload route runs against the fake pipeline."""
    app.dependency_overrides[get_pipeline] = lambda: pipeline
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sample_pdf():
    """A minimal valid PDF document."""
    return b"""%PDF-1.4
1 0 obj
<< /Type /Catalog /Pages 2 0 R >>
endobj
2 0 obj
<< /Type /Pages /Kids [3 0 R] /Count 1 >>
endobj
3 0 obj
<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] >>
endobj
xref
0 4
0000000000 65535 f
0000000009 00000 n
0000000058 00000 n
0000000115 00000 n
trailer
<< /Size 4 /Root 1 0 R >>
startxref
196
%%EOF"""


@pytest.fixture
def form_fields():
    return {"userUUID": "0b7f8a52-3c1e-4d2a-9a57-5e1f3f1f9c11", "firstName": "Mary Ann", "lastName": "Smith"}
