"""Unit tests for upload validation and stored filename handling"""

import pytest

from convohub.documents.service import DocumentValidationError, validate_upload
from convohub.domain.documents import (
    build_stored_filename,
    is_avatar_mime_type,
    is_safe_stored_filename,
    is_supported_mime_type,
    mime_type_for_filename,
    original_name_from_stored,
    sanitize_filename,
    validate_file_size,
    validate_upload_filename,
)


class TestMimeTypes:

    @pytest.mark.parametrize("mime_type", [
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "text/csv",
        "text/plain",
        "application/vnd.ms-excel",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ])
    def test_document_types_accepted(self, mime_type):
        assert is_supported_mime_type(mime_type)

    @pytest.mark.parametrize("mime_type", ["image/png", "application/zip", "text/html", None])
    def test_other_types_rejected(self, mime_type):
        assert not is_supported_mime_type(mime_type)

    def test_avatar_types(self):
        assert is_avatar_mime_type("image/webp")
        assert not is_avatar_mime_type("application/pdf")

    def test_mime_type_from_extension(self):
        assert mime_type_for_filename("1700000000000-1-Report.PDF") == "application/pdf"
        assert mime_type_for_filename("notes.unknown") == "application/octet-stream"


class TestFileSize:

    def test_empty_file_allowed(self):
        assert validate_file_size(0) == (True, None)

    def test_over_limit(self):
        is_valid, message = validate_file_size(11, max_size=10)
        assert not is_valid
        assert "exceeds maximum size" in message

    def test_within_limit(self):
        assert validate_file_size(10, max_size=10) == (True, None)


class TestFilenames:

    def test_sanitize_replaces_special_characters(self):
        assert sanitize_filename("Q3 report (final).pdf") == "Q3_report__final_.pdf"

    def test_sanitize_replaces_separators(self):
        assert sanitize_filename("../../etc/passwd") == "____etc_passwd"
        assert sanitize_filename("C:\\Users\\me\\faq.txt") == "C__Users_me_faq.txt"
        assert sanitize_filename("reports/q3.pdf") == "reports_q3.pdf"

    def test_sanitize_never_returns_empty(self):
        assert sanitize_filename("") == "file"

    def test_stored_filename_layout(self):
        stored = build_stored_filename("price list.xlsx", now_ms=1700000000000)
        assert stored.startswith("1700000000000-")
        assert stored.endswith("-price_list.xlsx")
        assert original_name_from_stored(stored) == "price_list.xlsx"

    def test_original_name_keeps_dashes(self):
        assert original_name_from_stored("1700000000000-42-price-list.xlsx") == "price-list.xlsx"

    def test_original_name_of_unprefixed_file(self):
        assert original_name_from_stored("faq.pdf") == "faq.pdf"

    @pytest.mark.parametrize("filename", ["../secret.pdf", "a/b.pdf", "a\\b.pdf", "x\x00.pdf", ""])
    def test_unsafe_stored_names(self, filename):
        assert not is_safe_stored_filename(filename)

    def test_upload_filename_rules(self):
        assert validate_upload_filename("faq.pdf") == (True, None)
        assert validate_upload_filename("   ")[0] is False
        assert validate_upload_filename("a" * 256)[0] is False


class TestValidateUpload:
    """validate_upload raises DocumentValidationError with the HTTP status to use"""

    def test_valid_upload(self):
        validate_upload("faq.txt", "text/plain", b"Opening hours: 9-17")

    def test_missing_filename(self):
        with pytest.raises(DocumentValidationError) as exc_info:
            validate_upload(None, "text/plain", b"data")
        assert exc_info.value.reason == "filename"
        assert exc_info.value.status_code == 400

    def test_wrong_type(self):
        with pytest.raises(DocumentValidationError) as exc_info:
            validate_upload("logo.png", "image/png", b"data")
        assert exc_info.value.message == "Invalid file type. Allowed: PDF, DOC, DOCX, CSV, TXT, XLS, XLSX"

    def test_empty_file_passes(self):
        validate_upload("faq.txt", "text/plain", b"")

    def test_oversized_file_is_413(self, monkeypatch):
        monkeypatch.setattr("convohub.documents.service.MAX_FILE_SIZE", 10)
        with pytest.raises(DocumentValidationError) as exc_info:
            validate_upload("faq.txt", "text/plain", b"x" * 11)
        assert exc_info.value.status_code == 413
        assert exc_info.value.reason == "size"
