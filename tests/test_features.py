"""Tests for feature extraction."""

import pytest

from mailcompat.analysis.features import FeatureSource, detect_features
from mailcompat.core.document import (
    InputTooLargeError,
    check_input_size,
    describe_element,
    is_blank,
    parse_document,
)


class TestInputGuard:
    @pytest.mark.parametrize("html", [None, "", "   ", "\n\t "])
    def test_blank(self, html):
        assert is_blank(html)

    def test_not_blank(self):
        assert not is_blank("<p>x</p>")

    def test_size_limit_counts_utf8_bytes(self):
        check_input_size("é" * 5, limit=10)
        with pytest.raises(InputTooLargeError) as exc_info:
            check_input_size("é" * 6, limit=10)
        assert exc_info.value.size == 12
        assert exc_info.value.limit == 10

    def test_size_error_message_states_limit(self):
        with pytest.raises(InputTooLargeError, match="2048KB limit"):
            check_input_size("x" * (2 * 1024 * 1024 + 1))

    def test_size_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            check_input_size("xx", limit=1)

    def test_describe_element(self):
        soup = parse_document('<div id="hero" class="card wide">x</div><td>y</td>')
        assert describe_element(soup.find("div")) == "div#hero.card.wide"
        assert describe_element(soup.find("td")) == "td"


class TestDetectFeatures:
    def test_blank_input_is_empty(self):
        assert len(detect_features("  ")) == 0

    def test_too_large_raises_before_parsing(self):
        with pytest.raises(InputTooLargeError):
            detect_features("<p>" + "x" * 100 + "</p>", limit=50)

    def test_structural_features(self, sample_html_email):
        features = detect_features(sample_html_email)
        structure = {occ.feature for occ in features.from_source(FeatureSource.STRUCTURE)}
        assert structure == {"<style>", "<link>", "<svg>", "<video>", "<form>"}

    def test_form_detected_from_input_alone(self):
        features = detect_features('<p><input type="text" name="q"></p>')
        assert "<form>" in features

    def test_form_detected_from_submit_button(self):
        assert "<form>" in detect_features('<button type="submit">Go</button>')
        assert "<form>" not in detect_features('<button type="button">Go</button>')

    def test_link_needs_stylesheet_rel(self):
        assert "<link>" not in detect_features('<link rel="icon" href="x.ico"><p>x</p>')
        assert "<link>" in detect_features('<link rel="stylesheet" href="x.css"><p>x</p>')

    def test_stylesheet_features(self, sample_html_email):
        features = detect_features(sample_html_email)
        stylesheet = {occ.feature for occ in features.from_source(FeatureSource.STYLESHEET)}
        assert {"@font-face", "@media", "border-radius", "box-shadow", "padding"} <= stylesheet
        # Declarations under a pseudo selector still count as used
        assert "opacity" in stylesheet

    def test_inline_features_carry_selector(self, sample_html_email):
        features = detect_features(sample_html_email)
        inline = {occ.feature: occ.selector for occ in features.from_source(FeatureSource.INLINE)}
        assert inline["display:flex"] == "div.header"
        assert inline["gap"] == "div.header"
        assert inline["position"] == "div.content"
        assert inline["display"] == "div.header"

    def test_inline_display_is_flex_or_grid(self):
        features = detect_features('<div style="display: inline-flex">x</div>')
        assert "display:flex" in features
        assert "display:grid" not in features

    def test_stylesheet_grid_compound(self, grid_stylesheet_email):
        features = detect_features(grid_stylesheet_email)
        assert "display:grid" in features
        assert "display:flex" not in features

    def test_gradient_on_any_property(self):
        features = detect_features(
            '<td style="background-image: radial-gradient(circle, #fff, #000)">x</td>'
        )
        assert "linear-gradient" in features
        assert "background-image" in features

    def test_semicolon_in_url_does_not_split(self):
        features = detect_features("""<td style="background: url('a;position:b.png')">x</td>""")
        assert "position" not in features
        assert "background" in features

    def test_malformed_css_is_not_fatal(self):
        html = "<style>.a { color: red; } @media {{{{ </style><p style='color: ; ;'>x</p>"
        features = detect_features(html)
        assert "<style>" in features

    def test_shared_parse_gives_same_result(self, sample_html_email):
        from_text = detect_features(sample_html_email)
        from_tree = detect_features(parse_document(sample_html_email))
        assert from_text.occurrences == from_tree.occurrences

    def test_each_feature_recorded_once_per_source(self):
        html = '<p style="color: red">a</p><p style="color: blue">b</p>'
        features = detect_features(html)
        assert [occ.feature for occ in features].count("color") == 1
