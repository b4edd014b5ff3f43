"""
Tests for extractor.reading.ocr

Tesseract is never invoked; pytesseract calls are patched.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest
import pytesseract
from PIL import Image

from mcq_toolkit.core.models.words import Word
from mcq_toolkit.extractor.config import ExtractionConfig
from mcq_toolkit.extractor.errors import ExtractionUnavailable
from mcq_toolkit.extractor.reading import ocr as ocr_module
from mcq_toolkit.extractor.reading.ocr import (
    OcrEngine,
    initialise_engine,
    ocr_session,
    read_ocr_words,
)
from mcq_toolkit.extractor.utils.pdf import open_document


def _tesseract_dict(rows):
    """Build an image_to_data DICT from (text, conf, left, top, width, height) rows."""
    data = {"text": [], "conf": [], "left": [], "top": [], "width": [], "height": []}
    for text, conf, left, top, width, height in rows:
        data["text"].append(text)
        data["conf"].append(conf)
        data["left"].append(left)
        data["top"].append(top)
        data["width"].append(width)
        data["height"].append(height)
    return data


@pytest.fixture
def tesseract_available(monkeypatch):
    monkeypatch.setattr(pytesseract, "get_tesseract_version", lambda: "5.3.0")
    monkeypatch.setattr(pytesseract, "get_languages", lambda config="": ["eng", "osd"])


class TestOcrEngine:
    """Tests for OcrEngine.recognize()."""

    def test_recognize_when_dict_output_then_words_in_points(self, monkeypatch):
        # Arrange
        calls = {}

        def fake_image_to_data(image, lang, config, output_type):
            calls.update(lang=lang, config=config)
            return _tesseract_dict([
                ("", -1, 0, 0, 900, 900),
                ("1.", 95.0, 90, 180, 18, 22),
                ("Hello", 91.5, 126, 180, 60, 22),
                ("  ", 0, 0, 0, 0, 0),
            ])

        monkeypatch.setattr(pytesseract, "image_to_data", fake_image_to_data)
        engine = OcrEngine(language="eng", psm=6)

        # Act
        words = engine.recognize(Image.new("L", (10, 10)), page=2, page_width=595, scale=2.0)

        # Assert
        assert [w.text for w in words] == ["1.", "Hello"]
        assert words[0].x == 45 and words[0].y == 90 and words[0].width == 9
        assert words[1].page == 2
        assert calls == {"lang": "eng", "config": "--psm 6"}

    def test_recognize_when_tesseract_error_then_raises_unavailable(self, monkeypatch):
        def broken(*args, **kwargs):
            raise pytesseract.TesseractError(1, "bad image")

        monkeypatch.setattr(pytesseract, "image_to_data", broken)
        engine = OcrEngine(language="eng", psm=6)
        with pytest.raises(ExtractionUnavailable, match="page 0"):
            engine.recognize(Image.new("L", (10, 10)), page=0, page_width=595, scale=1.0)


class TestInitialiseEngine:
    """Tests for initialise_engine()."""

    def test_initialise_when_language_installed_then_engine(self, tesseract_available):
        engine = initialise_engine(ExtractionConfig(ocr_psm=4))
        assert engine == OcrEngine(language="eng", psm=4, version="5.3.0")

    def test_initialise_when_language_missing_then_raises(self, tesseract_available):
        with pytest.raises(ExtractionUnavailable, match="'fra' is not installed"):
            initialise_engine(ExtractionConfig(ocr_language="fra"))

    def test_initialise_when_binary_missing_then_raises(self, monkeypatch):
        def missing():
            raise pytesseract.TesseractNotFoundError()

        monkeypatch.setattr(pytesseract, "get_tesseract_version", missing)
        with pytest.raises(ExtractionUnavailable, match="not available"):
            initialise_engine(ExtractionConfig())


class TestReadOcrWords:
    """Tests for read_ocr_words() with a patched recogniser."""

    def test_read_when_two_pages_then_sorted_by_page_and_position(
        self, monkeypatch, tesseract_available, pdf_bytes
    ):
        # Arrange
        def fake_recognize(self, image, *, page, page_width, scale):
            return [
                Word("later", x=50, y=200, width=20, height=10, page=page, page_width=page_width),
                Word(f"p{page}", x=50, y=100, width=20, height=10, page=page, page_width=page_width),
            ]

        monkeypatch.setattr(OcrEngine, "recognize", fake_recognize)
        config = ExtractionConfig(render_scale=1.0, ocr_workers=2)
        data = pdf_bytes([[(50, 72, "x")], [(50, 72, "y")]])

        # Act
        with open_document(data) as doc, ocr_session(config) as session:
            words = read_ocr_words(doc, session, config)

        # Assert
        assert [(w.page, w.text) for w in words] == [
            (0, "p0"), (0, "later"), (1, "p1"), (1, "later"),
        ]

    def test_read_when_render_fails_then_raises_unavailable(
        self, monkeypatch, tesseract_available, pdf_bytes
    ):
        def broken_render(page, scale, *, binarize_threshold=None):
            raise ExtractionUnavailable("Failed to render page 0")

        monkeypatch.setattr(ocr_module, "render_page", broken_render)
        config = ExtractionConfig(render_scale=1.0)
        with open_document(pdf_bytes([[(50, 72, "x")]])) as doc, ocr_session(config) as session:
            with pytest.raises(ExtractionUnavailable, match="render"):
                read_ocr_words(doc, session, config)

    def test_read_when_workers_finish_out_of_order_then_result_unchanged(
        self, monkeypatch, tesseract_available, pdf_bytes
    ):
        # Arrange
        completed = []

        def slow_first_page(self, image, *, page, page_width, scale):
            if page == 0:
                time.sleep(0.3)
            completed.append(page)
            return [Word(f"p{page}", x=50, y=100, width=20, height=10, page=page, page_width=page_width)]

        monkeypatch.setattr(OcrEngine, "recognize", slow_first_page)
        config = ExtractionConfig(render_scale=1.0, ocr_workers=3)
        data = pdf_bytes([[(50, 72, "x")], [(50, 72, "y")], [(50, 72, "z")]])

        # Act
        with open_document(data) as doc, ocr_session(config) as session:
            words = read_ocr_words(doc, session, config)

        # Assert
        assert completed[-1] == 0
        assert [w.text for w in words] == ["p0", "p1", "p2"]

    def test_read_when_many_pages_then_rendered_pages_bounded_by_workers(
        self, monkeypatch, tesseract_available, pdf_bytes
    ):
        # Arrange
        lock = threading.Lock()
        held = {"now": 0, "max": 0}
        real_render = ocr_module.render_page

        def counting_render(page, scale, *, binarize_threshold=None):
            with lock:
                held["now"] += 1
                held["max"] = max(held["max"], held["now"])
            return real_render(page, scale, binarize_threshold=binarize_threshold)

        def slow_recognize(self, image, *, page, page_width, scale):
            time.sleep(0.02)
            with lock:
                held["now"] -= 1
            return []

        monkeypatch.setattr(ocr_module, "render_page", counting_render)
        monkeypatch.setattr(OcrEngine, "recognize", slow_recognize)
        config = ExtractionConfig(render_scale=1.0, ocr_workers=2)
        data = pdf_bytes([[(50, 72, str(n))] for n in range(8)])

        # Act
        with open_document(data) as doc, ocr_session(config) as session:
            read_ocr_words(doc, session, config)

        # Assert
        assert held["now"] == 0
        assert held["max"] <= 2


class TestOcrSession:
    """Tests for ocr_session() pool lifecycle."""

    def test_session_when_recognition_fails_partway_then_pool_shut_down(
        self, monkeypatch, tesseract_available, pdf_bytes
    ):
        # Arrange
        shutdowns = []

        class RecordingExecutor(ThreadPoolExecutor):
            def shutdown(self, wait=True, *, cancel_futures=False):
                shutdowns.append(cancel_futures)
                super().shutdown(wait=wait, cancel_futures=cancel_futures)

        def fail_on_second_page(self, image, *, page, page_width, scale):
            if page == 1:
                raise ExtractionUnavailable(f"Tesseract failed on page {page}")
            return []

        monkeypatch.setattr(ocr_module, "ThreadPoolExecutor", RecordingExecutor)
        monkeypatch.setattr(OcrEngine, "recognize", fail_on_second_page)
        config = ExtractionConfig(render_scale=1.0, ocr_workers=1)
        data = pdf_bytes([[(50, 72, "x")], [(50, 72, "y")], [(50, 72, "z")]])

        # Act
        with open_document(data) as doc:
            with pytest.raises(ExtractionUnavailable, match="page 1"):
                with ocr_session(config) as session:
                    read_ocr_words(doc, session, config)

        # Assert
        assert shutdowns == [True]

    def test_session_when_engine_missing_then_no_pool_created(self, monkeypatch):
        created = []

        def missing():
            raise pytesseract.TesseractNotFoundError()

        monkeypatch.setattr(pytesseract, "get_tesseract_version", missing)
        monkeypatch.setattr(ocr_module, "ThreadPoolExecutor", lambda **kw: created.append(kw))

        with pytest.raises(ExtractionUnavailable):
            with ocr_session(ExtractionConfig()):
                pass

        assert created == []
