"""
Tests for extractor.utils.pdf module.
"""

from unittest.mock import Mock

import fitz
import numpy as np
import pytest
from PIL import Image

from mcq_toolkit.extractor.errors import DocumentProtected, DocumentUnreadable, ExtractionUnavailable
from mcq_toolkit.extractor.utils.pdf import (
    binarize,
    describe_source,
    ensure_text_access,
    open_document,
    render_page,
)


class TestOpenDocument:
    """Tests for open_document() function."""

    def test_open_document_when_bytes_then_returns_document(self, pdf_bytes):
        # Arrange
        data = pdf_bytes([[(50, 72, "1. Hello")], [(50, 72, "Answer Key")]])

        # Act
        with open_document(data) as doc:
            # Assert
            assert doc.page_count == 2

    def test_open_document_when_path_string_then_returns_document(self, pdf_file):
        path = pdf_file([[(50, 72, "1. Hello")]])
        with open_document(str(path)) as doc:
            assert doc.page_count == 1

    def test_open_document_when_empty_bytes_then_raises(self):
        with pytest.raises(DocumentUnreadable, match="empty"):
            open_document(b"")

    def test_open_document_when_garbage_bytes_then_raises(self):
        with pytest.raises(DocumentUnreadable):
            open_document(b"this is not a pdf at all")

    def test_open_document_when_missing_path_then_raises(self, tmp_path):
        with pytest.raises(DocumentUnreadable, match="not found"):
            open_document(tmp_path / "missing.pdf")

    def test_open_document_when_empty_file_then_raises(self, tmp_path):
        path = tmp_path / "empty.pdf"
        path.write_bytes(b"")
        with pytest.raises(DocumentUnreadable, match="empty"):
            open_document(path)


class TestDescribeSource:
    def test_describe_source_when_bytes_then_reports_size(self):
        assert describe_source(b"1234") == "<4 bytes>"

    def test_describe_source_when_path_then_file_name(self, tmp_path):
        assert describe_source(tmp_path / "quiz.pdf") == "quiz.pdf"


class TestEnsureTextAccess:
    """Tests for ensure_text_access() function."""

    def test_ensure_text_access_when_password_needed_then_raises(self):
        # Arrange
        doc = Mock(needs_pass=True)
        doc.authenticate.return_value = 0

        # Act & Assert
        with pytest.raises(DocumentProtected, match="password"):
            ensure_text_access(doc)
        doc.authenticate.assert_called_once_with("")

    def test_ensure_text_access_when_copy_forbidden_then_raises(self):
        doc = Mock(needs_pass=False, is_encrypted=True, permissions=fitz.PDF_PERM_PRINT)
        with pytest.raises(DocumentProtected, match="permissions"):
            ensure_text_access(doc)

    def test_ensure_text_access_when_unencrypted_then_passes(self):
        doc = Mock(needs_pass=False, is_encrypted=False)
        ensure_text_access(doc)

    def test_ensure_text_access_when_encrypted_file_then_raises(self, tmp_path):
        # Arrange
        path = tmp_path / "locked.pdf"
        doc = fitz.open()
        doc.new_page().insert_text((50, 72), "1. Secret")
        doc.save(path, encryption=fitz.PDF_ENCRYPT_AES_256, owner_pw="owner", user_pw="user")
        doc.close()

        # Act & Assert
        with fitz.open(path) as locked:
            with pytest.raises(DocumentProtected):
                ensure_text_access(locked)


class TestRenderPage:
    """Tests for render_page() function."""

    def test_render_page_when_valid_page_then_returns_grayscale(self):
        # Arrange
        mock_page = Mock()
        mock_pixmap = Mock(width=100, height=50, samples=bytes([255] * 100 * 50))
        mock_page.get_pixmap.return_value = mock_pixmap

        # Act
        image = render_page(mock_page, 2.0)

        # Assert
        assert image.mode == "L"
        assert image.size == (100, 50)

    def test_render_page_when_real_page_then_scales_size(self, pdf_bytes):
        with open_document(pdf_bytes([[(50, 72, "1. Hello")]])) as doc:
            image = render_page(doc[0], 1.0)
        assert image.size == (595, 842)

    def test_render_page_when_pymupdf_fails_then_raises_unavailable(self):
        mock_page = Mock(number=3)
        mock_page.get_pixmap.side_effect = RuntimeError("cannot render")
        with pytest.raises(ExtractionUnavailable, match="page 3"):
            render_page(mock_page, 2.0)


class TestBinarize:
    def test_binarize_when_threshold_then_two_levels(self):
        # Arrange
        arr = np.array([[100, 180, 200, 250]], dtype=np.uint8)
        image = Image.fromarray(arr)

        # Act
        result = np.asarray(binarize(image, 180))

        # Assert
        assert result.tolist() == [[0, 0, 255, 255]]
