import sys
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

import fitz
import pytest

# Add src to sys.path so we can import mcq_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from mcq_toolkit.core.models.words import Line, Word  # noqa: E402

A4_WIDTH = 595.0
A4_HEIGHT = 842.0

# (x, baseline_y, text)
TextItem = Tuple[float, float, str]


@pytest.fixture
def make_word():
    """Factory for Words on an A4 page."""
    def _make(text: str, x: float = 50.0, y: float = 100.0, *, width: float = None,
              height: float = 11.0, page: int = 0, page_width: float = A4_WIDTH) -> Word:
        if width is None:
            width = 6.0 * len(text)
        return Word(text=text, x=x, y=y, width=width, height=height, page=page, page_width=page_width)
    return _make


@pytest.fixture
def make_line(make_word):
    """Factory for a Line whose words are laid out left to right from x."""
    def _make(text: str, x: float = 50.0, y: float = 100.0, *, page: int = 0,
              page_width: float = A4_WIDTH) -> Line:
        words: List[Word] = []
        cursor = x
        for token in text.split():
            word = make_word(token, cursor, y, page=page, page_width=page_width)
            words.append(word)
            cursor = word.right + 4.0
        return Line(page=page, y=y, text=text, words=tuple(words))
    return _make


@pytest.fixture
def make_lines(make_line):
    """Stack texts as left-column lines, 18pt apart, on one page."""
    def _make(texts: Iterable[str], *, page: int = 0, start_y: float = 72.0, x: float = 50.0) -> List[Line]:
        return [
            make_line(text, x, start_y + i * 18.0, page=page)
            for i, text in enumerate(texts)
        ]
    return _make


def build_pdf(pages: Sequence[Sequence[TextItem]], fontsize: float = 11) -> fitz.Document:
    """Create an in-memory PDF; each page is a list of (x, baseline_y, text)."""
    doc = fitz.open()
    for items in pages:
        page = doc.new_page(width=A4_WIDTH, height=A4_HEIGHT)
        for x, y, text in items:
            page.insert_text((x, y), text, fontsize=fontsize)
    return doc


def stacked(texts: Iterable[str], *, x: float = 50.0, start_y: float = 72.0, step: float = 18.0) -> List[TextItem]:
    """Lay texts out top to bottom at a fixed x."""
    return [(x, start_y + i * step, text) for i, text in enumerate(texts)]


@pytest.fixture
def pdf_bytes():
    """Factory returning PDF bytes for a list of pages of text items."""
    def _make(pages: Sequence[Sequence[TextItem]]) -> bytes:
        doc = build_pdf(pages)
        data = doc.tobytes()
        doc.close()
        return data
    return _make


@pytest.fixture
def pdf_file(tmp_path: Path):
    """Factory writing a PDF to tmp_path and returning its path."""
    def _make(pages: Sequence[Sequence[TextItem]], name: str = "quiz.pdf") -> Path:
        path = tmp_path / name
        doc = build_pdf(pages)
        doc.save(path)
        doc.close()
        return path
    return _make


def question_texts(numbers: Iterable[int]) -> List[str]:
    """Five lines per question: stem then options a-d."""
    texts: List[str] = []
    for n in numbers:
        texts.extend([
            f"{n}. What is {n} plus {n}?",
            f"a) {2 * n}",
            f"b) {2 * n + 1}",
            f"c) {2 * n + 2}",
            f"d) {2 * n + 3}",
        ])
    return texts


def quiz_page_items(count: int, *, with_key: bool = True) -> List[TextItem]:
    """A single-column quiz of ``count`` questions, optionally followed by a key."""
    texts = question_texts(range(1, count + 1))
    if with_key:
        texts.append("Answer Key")
        texts.append("  ".join(f"{n}. A" for n in range(1, count + 1)))
    return stacked(texts)
