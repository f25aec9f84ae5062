# =============================================================================
# Feature Extraction
# =============================================================================
# Finds every potentially incompatible feature a document uses.
#
# Three scans, each recording FeatureOccurrences in the order it finds them:
#
#   1. Structure   - <style>, <link rel=stylesheet>, <svg>, <video>, forms
#   2. Stylesheets - at-rules and declarations from every <style> block
#   3. Inline      - declarations from every style="" attribute
#
# Declarations also produce compound keys when the value matters:
#   display: flex / inline-flex    -> "display:flex"
#   display: grid / inline-grid    -> "display:grid"
#   any *-gradient() value         -> "linear-gradient"
#
# Nothing here raises on malformed CSS or HTML. A block that cannot be
# understood just contributes fewer features.
# =============================================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator

from bs4 import BeautifulSoup

from mailcompat.core.document import (
    MAX_HTML_BYTES,
    check_input_size,
    describe_element,
    is_blank,
    parse_document,
)
from mailcompat.css.declarations import has_gradient, parse_declarations
from mailcompat.css.stylesheet import parse_style_block
from mailcompat.rules.support import DISPLAY_FLEX, DISPLAY_GRID, GRADIENT

# Matches rel="stylesheet" and rel="alternate stylesheet", any case
STYLESHEET_LINK_SELECTOR = "link[rel~='stylesheet' i]"
FORM_SELECTOR = "form, input, button[type='submit' i]"


class FeatureSource(Enum):
    """Where in the document a feature was seen."""
    STRUCTURE = "structure"     # An element's presence
    STYLESHEET = "stylesheet"   # Inside a <style> block
    INLINE = "inline"           # Inside a style="" attribute


@dataclass(frozen=True)
class FeatureOccurrence:
    """
    One feature key seen in one place.

    Attributes:
        feature: Feature key ("<svg>", "@media", "color", "display:flex").
        source: Which scan found it.
        selector: Descriptor of the first element carrying it (inline only).
    """
    feature: str
    source: FeatureSource
    selector: str | None = None


@dataclass
class FeatureSet:
    """
    Features found in a document, in discovery order.

    Each (feature, source) pair is recorded once; for inline features the
    first element that used it is kept.
    """
    occurrences: list[FeatureOccurrence] = field(default_factory=list)

    def add(self, feature: str, source: FeatureSource, selector: str | None = None) -> None:
        for existing in self.occurrences:
            if existing.feature == feature and existing.source == source:
                return
        self.occurrences.append(FeatureOccurrence(feature, source, selector))

    def from_source(self, source: FeatureSource) -> list[FeatureOccurrence]:
        return [occ for occ in self.occurrences if occ.source == source]

    def __contains__(self, feature: str) -> bool:
        return any(occ.feature == feature for occ in self.occurrences)

    def __iter__(self) -> Iterator[FeatureOccurrence]:
        return iter(self.occurrences)

    def __len__(self) -> int:
        return len(self.occurrences)


def detect_features(
    document: str | BeautifulSoup,
    *,
    limit: int = MAX_HTML_BYTES,
) -> FeatureSet:
    """
    Enumerate the features a document uses.

    Args:
        document: Raw HTML, or a tree already parsed by parse_document()
                  (analyses may share one read-only parse).
        limit: Input size ceiling in bytes, for raw HTML.

    Returns:
        A FeatureSet. Empty for blank input.

    Raises:
        InputTooLargeError: If raw HTML exceeds limit.

    Usage:
        >>> features = detect_features('<div style="display:grid">x</div>')
        >>> "display:grid" in features
        True
    """
    if isinstance(document, str):
        if is_blank(document):
            return FeatureSet()
        check_input_size(document, limit)
        soup = parse_document(document)
    else:
        soup = document

    features = FeatureSet()
    _scan_structure(soup, features)
    _scan_stylesheets(soup, features)
    _scan_inline_styles(soup, features)
    return features


# -----------------------------------------------------------------------------
# Scans
# -----------------------------------------------------------------------------

def _scan_structure(soup: BeautifulSoup, features: FeatureSet) -> None:
    if soup.find("style"):
        features.add("<style>", FeatureSource.STRUCTURE)
    if soup.select_one(STYLESHEET_LINK_SELECTOR):
        features.add("<link>", FeatureSource.STRUCTURE)
    if soup.find("svg"):
        features.add("<svg>", FeatureSource.STRUCTURE)
    if soup.find("video"):
        features.add("<video>", FeatureSource.STRUCTURE)
    if soup.select_one(FORM_SELECTOR):
        features.add("<form>", FeatureSource.STRUCTURE)


def _scan_stylesheets(soup: BeautifulSoup, features: FeatureSet) -> None:
    at_rules: list[str] = []
    properties: list[str] = []
    compounds: set[str] = set()

    for style in soup.find_all("style"):
        sheet = parse_style_block(style.get_text())
        for at_rule in sorted(sheet.at_rules):
            if at_rule not in at_rules:
                at_rules.append(at_rule)
        for decl in sheet.declarations:
            if decl.name not in properties:
                properties.append(decl.name)
            compounds.update(_compound_keys(decl.name, decl.value))

    for key in at_rules + properties:
        features.add(key, FeatureSource.STYLESHEET)
    # Compounds last, in a fixed order
    for key in (DISPLAY_FLEX, DISPLAY_GRID, GRADIENT):
        if key in compounds:
            features.add(key, FeatureSource.STYLESHEET)


def _scan_inline_styles(soup: BeautifulSoup, features: FeatureSet) -> None:
    for element in soup.find_all(style=True):
        selector = describe_element(element)
        for decl in parse_declarations(element["style"]):
            value = decl.value.lower()
            if decl.name == "display":
                # An inline display value is one or the other
                if "flex" in value:
                    features.add(DISPLAY_FLEX, FeatureSource.INLINE, selector)
                elif "grid" in value:
                    features.add(DISPLAY_GRID, FeatureSource.INLINE, selector)
            features.add(decl.name, FeatureSource.INLINE, selector)
            if has_gradient(value):
                features.add(GRADIENT, FeatureSource.INLINE, selector)


def _compound_keys(name: str, value: str) -> set[str]:
    keys = set()
    value = value.lower()
    if name == "display":
        if "flex" in value:
            keys.add(DISPLAY_FLEX)
        if "grid" in value:
            keys.add(DISPLAY_GRID)
    if has_gradient(value):
        keys.add(GRADIENT)
    return keys
