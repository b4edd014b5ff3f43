"""
Tests for extractor.layout.columns
"""

from mcq_toolkit.extractor.layout.columns import ColumnSide, classify_line, reading_order


class TestClassifyLine:
    """Tests for classify_line() function."""

    def test_classify_when_starts_right_of_midpoint_then_right(self, make_line):
        assert classify_line(make_line("11. Right", 320, 100)) is ColumnSide.RIGHT

    def test_classify_when_starts_left_then_left(self, make_line):
        assert classify_line(make_line("1. Left", 50, 100)) is ColumnSide.LEFT

    def test_classify_when_crosses_midpoint_by_margin_then_full(self, make_line):
        header = make_line("General Knowledge Quiz " + "word " * 40, 50, 40)
        assert header.right > 595 / 2 + 36
        assert classify_line(header, margin=36.0) is ColumnSide.FULL


class TestReadingOrder:
    """Tests for reading_order() function."""

    def test_reading_order_when_two_columns_then_left_column_first(self, make_line):
        # Arrange - questions 1-10 on the left, 11-20 on the right, interleaved by y
        lines = []
        for i in range(10):
            y = 80 + i * 60
            lines.append(make_line(f"{i + 11}. Right question", 320, y))
            lines.append(make_line(f"{i + 1}. Left question", 50, y))

        # Act
        ordered = reading_order(lines)

        # Assert
        numbers = [int(ln.text.split(".")[0]) for ln in ordered]
        assert numbers == list(range(1, 21))

    def test_reading_order_when_full_width_header_then_stays_in_left_stream(self, make_line):
        header = make_line("Quiz " + "title " * 45, 50, 40)
        left = make_line("1. Left", 50, 100)
        right = make_line("11. Right", 320, 60)

        ordered = reading_order([right, left, header])

        assert ordered == (header, left, right)

    def test_reading_order_when_several_pages_then_page_by_page(self, make_line):
        p0_right = make_line("3. Right", 320, 100, page=0)
        p1_left = make_line("4. Next page", 50, 50, page=1)
        p0_left = make_line("1. Left", 50, 300, page=0)

        ordered = reading_order([p1_left, p0_right, p0_left])

        assert ordered == (p0_left, p0_right, p1_left)
