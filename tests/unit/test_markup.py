"""Unit tests for markup-to-text conversion."""

import pytest

from docvision.extractors.markup import decode_entities, html_to_text


class TestHtmlToText:
    """Test the regex transform pipeline."""

    def test_paragraphs_become_blank_line_separated(self):
        assert html_to_text('<p>Hello</p><p>World</p>') == 'Hello\n\nWorld'

    def test_headings_and_divs_break_blocks(self):
        markup = '<h1>Title</h1><div>Body</div><li>item</li>'
        assert html_to_text(markup) == 'Title\n\nBody\n\nitem'

    def test_br_variants(self):
        assert html_to_text('a<br>b<br/>c<br />d<BR>e') == 'a\nb\nc\nd\ne'

    def test_script_and_style_removed_with_content(self):
        markup = '<style>p { color: red; }</style><script type="text/javascript">var x = 1;</script><p>Visible</p>'
        assert html_to_text(markup) == 'Visible'

    def test_table_cells_and_rows(self):
        markup = '<table><tr><td>a</td><td>b</td></tr><tr><td>c</td></tr></table>'
        assert html_to_text(markup) == 'a b \n\nc'

    def test_escaped_markup_is_text_not_tags(self):
        assert html_to_text('<p>1 &lt; 2 &amp;&amp; 3 &gt; 2</p>') == '1 < 2 && 3 > 2'

    def test_nbsp_collapses_with_spaces(self):
        assert html_to_text('<p>a&nbsp;&nbsp; \t b</p>') == 'a b'

    def test_line_endings_normalized(self):
        assert html_to_text('a\r\nb') == 'a\nb'

    def test_excess_newlines_collapse_to_one_blank_line(self):
        assert html_to_text('<p>a</p>\n\n\n\n<p>b</p>') == 'a\n\nb'

    def test_output_is_trimmed(self):
        assert html_to_text('  \n<div>  x  </div>\n  ') == 'x'

    def test_tag_only_input_has_no_angle_brackets(self):
        text = html_to_text('<html><body><div class="x"><span>one</span> <b>two</b></div></body></html>')
        assert text == 'one two'
        assert '<' not in text and '>' not in text

    def test_output_never_longer_than_entity_free_input(self):
        markup = '<section><header>Head</header><article><p>Some   text</p></article></section>'
        assert len(html_to_text(markup)) <= len(markup)


class TestDecodeEntities:

    @pytest.mark.parametrize("entity", ['&#65;', '&#x41;', '&#X41;'])
    def test_numeric_entities(self, entity):
        assert decode_entities(entity) == 'A'

    def test_named_typographic_entities(self):
        assert decode_entities('&ldquo;hi&rdquo; &mdash; &hellip;') == '\u201chi\u201d \u2014 \u2026'

    def test_out_of_range_code_point_dropped(self):
        assert decode_entities('a&#1114112;b') == 'ab'

    def test_surrogate_code_point_dropped(self):
        assert decode_entities('a&#xD800;b') == 'ab'

    def test_unknown_named_entity_left_alone(self):
        assert decode_entities('&eacute;') == '&eacute;'
