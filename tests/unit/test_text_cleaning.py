"""
Unit tests for text normalization.

Tests:
- Full-width folding
- Tag stripping with line breaks
- Whitespace cleanup
"""
from lurespec.utils.text_cleaning import (
    fold_width,
    normalize,
    normalize_whitespace,
    split_lines,
    strip_html_tags,
)


class TestFoldWidth:
    """Tests for full-width to half-width folding."""

    def test_folds_digits_letters_and_slash(self):
        assert fold_width("１２０ｍｍ／１５ｇ") == "120mm/15g"

    def test_folds_ideographic_space_and_yen(self):
        assert fold_width("価格　￥１，２００") == "価格 ¥1,200"

    def test_long_vowel_between_ascii_becomes_dash(self):
        assert fold_width("SE75ー2") == "SE75-2"

    def test_long_vowel_inside_katakana_is_kept(self):
        assert fold_width("ルアー") == "ルアー"

    def test_empty(self):
        assert fold_width("") == ""


class TestStripHtmlTags:
    """Tests for tag stripping."""

    def test_block_closers_become_newlines(self):
        assert strip_html_tags("<p>Hello <strong>world</strong></p>") == "Hello world\n"

    def test_br_becomes_newline(self):
        assert strip_html_tags("a<br>b<br/>c") == "a\nb\nc"

    def test_drops_script_and_comments(self):
        result = strip_html_tags("<!-- note --><script>var a = 1;</script>text")
        assert result == "text"


class TestNormalize:
    """Tests for the full normalization pipeline."""

    def test_markup_with_full_width_text(self):
        assert normalize("●ＳＥ７５／１９５ｍｍ<br>約７５ｇ") == "●SE75/195mm\n約75g"

    def test_decodes_entities(self):
        assert normalize("Gold&amp;Black&nbsp;10g") == "Gold&Black 10g"

    def test_source_newlines_in_markup_are_spaces(self):
        assert normalize("<p>重量\n   10g</p>") == "重量 10g"

    def test_plain_text_keeps_newlines(self):
        assert normalize("重量 10g\n価格 ¥1,000") == "重量 10g\n価格 ¥1,000"

    def test_cells_are_separated(self):
        assert normalize("<td>自重</td><td>10g</td>") == "自重 10g"

    def test_collapses_repeated_blank_lines(self):
        assert normalize("a<br><br><br><br>b") == "a\n\nb"

    def test_empty_input(self):
        assert normalize("") == ""
        assert normalize(None) == ""


class TestWhitespace:
    """Tests for whitespace helpers."""

    def test_normalize_whitespace(self):
        assert normalize_whitespace("hello    world\n\ntest") == "hello world test"

    def test_split_lines_drops_blank(self):
        assert split_lines("a\n\n b ") == ["a", "b"]

    def test_split_lines_keeps_blank(self):
        assert split_lines("a\n\nb", keep_blank=True) == ["a", "", "b"]
