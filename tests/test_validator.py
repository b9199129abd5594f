import pytest

from conftest import POLICY
from cv_intake_backend.validator import RejectionReason, check_extension, check_size, validate


class TestCheckExtension:
    @pytest.mark.parametrize(
        "filename",
        ["cv.pdf", "cv.doc", "cv.docx", "cv.odt", "cv.rtf", "cv.wps", "cv.wpd", "REPORT.PDF", "Resume.DocX", "my.cv.v2.odt", ".pdf", "uploads/cv.rtf"],
    )
    def test_allowed(self, filename):
        assert check_extension(filename, POLICY) is None

    @pytest.mark.parametrize("filename", ["resume.exe", "resume", "resume.pdf.exe", "resume.txt", "archive.zip", "resume.", "pdf"])
    def test_not_allowed(self, filename):
        assert check_extension(filename, POLICY) is RejectionReason.EXTENSION_NOT_ALLOWED

    def test_empty_filename(self):
        assert check_extension("", POLICY) is RejectionReason.MISSING_FILENAME


class TestCheckSize:
    def test_at_limit(self):
        assert check_size(POLICY.max_file_size, POLICY) is None

    def test_over_limit(self):
        assert check_size(POLICY.max_file_size + 1, POLICY) is RejectionReason.FILE_TOO_LARGE

    def test_empty_file(self):
        assert check_size(0, POLICY) is None


class TestValidate:
    def test_ok(self):
        assert validate("resume.pdf", 500 * 1024, POLICY) is None

    def test_extension_checked_first(self):
        assert validate("resume.exe", 10 * 1024 * 1024, POLICY) is RejectionReason.EXTENSION_NOT_ALLOWED

    def test_oversize(self):
        assert validate("resume.pdf", 2 * 1024 * 1024, POLICY) is RejectionReason.FILE_TOO_LARGE

    def test_reason_messages(self):
        assert RejectionReason.EXTENSION_NOT_ALLOWED.value == "File type not allowed"
        assert RejectionReason.FILE_TOO_LARGE.value == "File size exceeds limit"
