"""Tests for per-engine document rewriting."""

import pytest
from bs4 import BeautifulSoup, Comment

from mailcompat.core.document import InputTooLargeError
from mailcompat.core.engines import ENGINES
from mailcompat.core.models import Framework, Severity
from mailcompat.transform.inliner import has_pseudo_selector, inline_styles
from mailcompat.transform.pipeline import transform_for_all_engines, transform_for_engine


def _soup(html):
    return BeautifulSoup(html, "lxml")


def _features(result, severity=None):
    return [
        w.feature for w in result.warnings
        if severity is None or w.severity == severity
    ]


# =============================================================================
# Inliner
# =============================================================================

class TestInliner:
    def test_pseudo_detection(self):
        assert has_pseudo_selector("a:hover")
        assert has_pseudo_selector("p::first-line")
        assert has_pseudo_selector("li:first-child")
        assert not has_pseudo_selector(".a > p")
        assert not has_pseudo_selector("a[href^='mailto:']")

    def test_escaped_colon_is_not_a_pseudo(self):
        assert not has_pseudo_selector(r".sm\:w-full")
        assert has_pseudo_selector(r".sm\:w-full:hover")

    def test_tailwind_responsive_class_is_inlined(self):
        soup = _soup(r"<style>.sm\:w-full { width: 100% }</style>"
                     '<td class="sm:w-full">x</td>')
        assert inline_styles(soup) == 1
        assert soup.td["style"] == "width: 100%"

    def test_appends_to_existing_style(self):
        soup = _soup('<style>.a { color: red } p { margin: 0 }</style><p class="a" style="padding: 1px;">x</p>')
        inline_styles(soup)
        assert soup.p["style"] == "padding: 1px; color: red; margin: 0"

    def test_document_order_not_specificity(self):
        soup = _soup('<style>#hero { color: blue } .card { color: red }</style>'
                     '<div id="hero" class="card">x</div>')
        inline_styles(soup)
        assert soup.div["style"] == "color: blue; color: red"

    def test_pseudo_rules_skipped(self):
        soup = _soup("<style>a:hover { color: red }</style><a href='#'>x</a>")
        assert inline_styles(soup) == 0
        assert soup.a.get("style") is None

    def test_invalid_selector_skipped(self):
        soup = _soup("<style>..bad { color: red } p { color: blue }</style><p>x</p>")
        inline_styles(soup)
        assert soup.p["style"] == "color: blue"

    def test_rules_inside_media_are_inlined(self):
        soup = _soup("<style>@media (max-width: 600px) { p { color: red } }</style><p>x</p>")
        inline_styles(soup)
        assert soup.p["style"] == "color: red"

    def test_important_kept(self):
        soup = _soup("<style>p { color: red !important }</style><p>x</p>")
        inline_styles(soup)
        assert soup.p["style"] == "color: red !important"

    def test_style_blocks_left_in_place(self):
        soup = _soup("<style>p { color: red }</style><p>x</p>")
        inline_styles(soup)
        assert soup.find("style") is not None


# =============================================================================
# Pipeline contract
# =============================================================================

class TestPipeline:
    def test_position_is_stripped_once(self, positioned_email):
        html = positioned_email.replace(
            "</body>", '<p style="position: relative">again</p></body>'
        )
        result = transform_for_engine(html, "gmail-web")

        for element in _soup(result.html).find_all(style=True):
            assert "position" not in element["style"]
        position = [w for w in result.warnings if w.feature == "position"]
        assert len(position) == 1
        assert position[0].severity == Severity.WARNING
        assert position[0].message == 'Gmail strips "position" from styles.'

    def test_other_declarations_survive(self, positioned_email):
        result = transform_for_engine(positioned_email, "gmail-web")
        assert _soup(result.html).find(id="badge")["style"] == "color: red"

    @pytest.mark.parametrize("html", ["", "  ", "\n"])
    def test_blank_input(self, html):
        result = transform_for_engine(html, "gmail-web")
        assert result.html == ""
        assert result.warnings == []

    def test_unknown_engine(self, positioned_email):
        result = transform_for_engine(positioned_email, "lotus-notes")
        assert result.html == positioned_email
        assert len(result.warnings) == 1
        warning = result.warnings[0]
        assert warning.severity == Severity.INFO
        assert warning.feature == "unknown"
        assert "lotus-notes" in warning.message

    def test_size_limit(self, positioned_email):
        with pytest.raises(InputTooLargeError):
            transform_for_engine(positioned_email, "gmail-web", limit=10)

    def test_unknown_framework(self, positioned_email):
        with pytest.raises(ValueError):
            transform_for_engine(positioned_email, "gmail-web", "handlebars")

    @pytest.mark.parametrize("engine_id", [engine.id for engine in ENGINES])
    def test_idempotent(self, sample_html_email, engine_id):
        first = transform_for_engine(sample_html_email, engine_id, Framework.JSX)
        second = transform_for_engine(sample_html_email, engine_id, Framework.JSX)
        assert first.html == second.html
        assert first.warnings == second.warnings

    @pytest.mark.parametrize("engine_id", [engine.id for engine in ENGINES])
    def test_warnings_sorted_and_unique(self, sample_html_email, engine_id):
        result = transform_for_engine(sample_html_email, engine_id)
        ranks = [w.severity.rank for w in result.warnings]
        assert ranks == sorted(ranks)
        keys = [(w.feature, w.severity) for w in result.warnings]
        assert len(keys) == len(set(keys))
        assert all(w.engine_id == engine_id for w in result.warnings)

    def test_all_engines(self, sample_html_email):
        results = transform_for_all_engines(sample_html_email)
        assert [r.engine_id for r in results] == [engine.id for engine in ENGINES]

    def test_all_engines_blank(self):
        results = transform_for_all_engines("")
        assert all(r.html == "" and r.warnings == [] for r in results)

    def test_input_is_not_shared_between_engines(self, sample_html_email):
        results = {r.engine_id: r for r in transform_for_all_engines(sample_html_email)}
        gmail, outlook = results["gmail-web"], results["outlook-web"]
        assert "<style>" not in gmail.html
        assert "<style>" in outlook.html

    def test_to_dict(self, positioned_email):
        data = transform_for_engine(positioned_email, "gmail-web").to_dict()
        assert data["engine_id"] == "gmail-web"
        assert data["warnings"][0]["feature"] == "position"
        assert data["warnings"][0]["fix_type"] == "structural"


# =============================================================================
# Engine families
# =============================================================================

class TestGmail:
    def test_styles_inlined_then_removed(self):
        html = "<html><head><style>.a { color: red; position: absolute }</style></head>" \
               "<body><p class='a'>x</p></body></html>"
        result = transform_for_engine(html, "gmail-ios")
        soup = _soup(result.html)

        assert soup.find("style") is None
        assert soup.p["style"] == "color: red"
        assert "position" in _features(result, Severity.WARNING)

    def test_structural_replacements(self, sample_html_email):
        result = transform_for_engine(sample_html_email, "gmail-web")
        soup = _soup(result.html)

        assert soup.find("svg") is None
        assert soup.find("img", alt="[SVG not supported]") is not None
        assert soup.find("form") is None
        assert soup.find("input") is not None
        assert soup.find("link") is None
        errors = _features(result, Severity.ERROR)
        assert {"<svg>", "<form>", "<link>"} <= set(errors)

    def test_font_face_detected_before_removal(self, sample_html_email):
        result = transform_for_engine(sample_html_email, "gmail-web")
        assert "@font-face" in _features(result, Severity.WARNING)

    def test_value_strips(self):
        html = ('<div style="display: grid; color: red">a</div>'
                '<div style="display: flex">b</div>'
                '<td style="background: linear-gradient(#fff, #000); background-color: #fff">c</td>')
        result = transform_for_engine(html, "gmail-web")
        soup = _soup(result.html)

        divs = soup.find_all("div")
        assert divs[0]["style"] == "color: red"
        assert divs[1]["style"] == "display: flex"
        assert soup.find("td")["style"] == "background-color: #fff"
        assert {"display", "background"} <= set(_features(result, Severity.WARNING))

    def test_mso_comments_removed(self):
        html = ("<html><body><!--[if mso]><table><tr><td><![endif]-->"
                "<!-- keep me --><p>x</p></body></html>")
        result = transform_for_engine(html, "gmail-web")
        comments = _soup(result.html).find_all(string=lambda t: isinstance(t, Comment))
        assert [c.strip() for c in comments] == ["keep me"]

    def test_partial_style_note(self, positioned_email):
        result = transform_for_engine(positioned_email, "gmail-android")
        note = [w for w in result.warnings if w.feature == "<style>"]
        assert note[0].severity == Severity.INFO
        assert note[0].suggestion.startswith("Use inline styles as the primary approach")

    def test_framework_specific_fix(self, sample_html_email):
        result = transform_for_engine(sample_html_email, "gmail-web", Framework.JSX)
        svg = next(w for w in result.warnings if w.feature == "<svg>")
        assert svg.fix.language == "jsx"
        assert svg.fix_is_generic_fallback is False

    def test_element_without_remaining_styles(self):
        result = transform_for_engine('<p style="opacity: 0.5">x</p>', "gmail-web")
        assert _soup(result.html).p.get("style") is None


class TestOutlookDesktop:
    def test_layout_checks(self, sample_html_email):
        result = transform_for_engine(sample_html_email, "outlook-windows")
        by_feature = {w.feature: w for w in result.warnings}

        assert by_feature["display:flex"].severity == Severity.ERROR
        assert "Microsoft Word" in by_feature["display:flex"].message
        assert "ignores max-width" in by_feature["max-width"].message
        assert by_feature["position"].severity == Severity.WARNING

    def test_properties_stripped_and_style_kept(self, sample_html_email):
        result = transform_for_engine(sample_html_email, "outlook-windows")
        soup = _soup(result.html)

        assert soup.find("style") is not None
        assert soup.find("svg") is not None
        for element in soup.find_all(style=True):
            assert "max-width" not in element["style"]
            assert "display" not in element["style"]

    def test_border_radius_and_background_image(self):
        html = ('<a style="border-radius: 6px; color: #fff">Go</a>'
                '<td style="background-image: url(bg.jpg)">x</td>')
        result = transform_for_engine(html, "outlook-windows")
        by_feature = {w.feature: w for w in result.warnings}

        assert "sharp corners" in by_feature["border-radius"].message
        assert "VML" in by_feature["background-image"].message
        assert "v:roundrect" in by_feature["border-radius"].fix.after
        assert _soup(result.html).a["style"] == "color: #fff"

    def test_gradient_background_image_stripped(self):
        html = '<td style="background-image: linear-gradient(red, blue); color: red">x</td>'
        result = transform_for_engine(html, "outlook-windows")
        assert _soup(result.html).td["style"] == "color: red"


class TestOtherEngines:
    def test_outlook_web(self, sample_html_email):
        result = transform_for_engine(sample_html_email, "outlook-web")
        soup = _soup(result.html)
        assert soup.find("style") is not None
        assert "position" in _features(result, Severity.WARNING)
        assert soup.find("div", class_="content")["style"] == "max-width: 600px"

    def test_samsung_only_notes(self):
        html = '<p style="opacity: 0.5; box-shadow: 0 0 1px #000">x</p>'
        result = transform_for_engine(html, "samsung-mail")
        assert _soup(result.html).p["style"] == "opacity: 0.5; box-shadow: 0 0 1px #000"
        assert _features(result) == ["opacity", "box-shadow"]
        assert all(w.severity == Severity.INFO for w in result.warnings)
        assert result.warnings[0].message == 'Samsung Mail has limited support for "opacity".'

    def test_hey_position_values(self):
        html = ('<div style="position: fixed; top: 0">a</div>'
                '<div style="position: relative">b</div>')
        result = transform_for_engine(html, "hey-mail")
        divs = _soup(result.html).find_all("div")
        assert divs[0]["style"] == "top: 0"
        assert divs[1]["style"] == "position: relative"
        assert "dark-mode" in _features(result, Severity.INFO)

    def test_hey_dark_mode_note_only_when_missing(self):
        html = "<style>@media (prefers-color-scheme: dark) { p { color: #fff } }</style><p>x</p>"
        result = transform_for_engine(html, "hey-mail")
        assert "dark-mode" not in _features(result)

    def test_hey_strips_links_and_forms(self, sample_html_email):
        result = transform_for_engine(sample_html_email, "hey-mail")
        soup = _soup(result.html)
        assert soup.find("link") is None
        assert soup.find("form") is None
        assert soup.find("svg") is not None

    def test_apple_mail_dark_mode_images(self, sample_html_email):
        result = transform_for_engine(sample_html_email, "apple-mail-macos")
        dark = [w for w in result.warnings if w.feature == "dark-mode"]
        assert len(dark) == 1
        assert dark[0].severity == Severity.INFO
        assert dark[0].suggestion.startswith("Add a white background")
        assert dark[0].fix is not None

    def test_apple_mail_leaves_document_alone(self, table_html_email):
        result = transform_for_engine(table_html_email, "apple-mail-ios")
        assert result.warnings == []

    def test_yahoo(self):
        html = '<td style="background: #fff url(bg.png); box-shadow: 0 0 1px #000">x</td>'
        result = transform_for_engine(html, "yahoo-mail")
        by_feature = {w.feature: w for w in result.warnings}

        assert by_feature["class"].severity == Severity.INFO
        assert by_feature["class"].suggestion is None
        assert by_feature["background-image"].severity == Severity.WARNING
        assert _soup(result.html).td["style"] == "background: #fff url(bg.png)"

    def test_thunderbird_animation(self):
        html = "<style>.s { animation-name: spin }</style><p class='s'>x</p>"
        result = transform_for_engine(html, "thunderbird")
        assert _features(result) == ["animation"]
        assert transform_for_engine("<p>x</p>", "thunderbird").warnings == []

    def test_superhuman(self):
        html = '<p style="transition: opacity 1s">x</p><form><input></form>'
        result = transform_for_engine(html, "superhuman")
        by_feature = {w.feature: w for w in result.warnings}

        assert "prefers-reduced-motion" in by_feature["animation"].suggestion
        assert by_feature["<style>"].severity == Severity.INFO
        assert by_feature["<form>"].severity == Severity.ERROR
        assert _soup(result.html).find("form") is None
