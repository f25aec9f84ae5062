# =============================================================================
# Support Matrix
# =============================================================================
# feature key -> engine id -> SupportLevel
#
# The table itself lives in data/support.toml and is read exactly once, the
# first time anything asks for it. After that it is a read-only mapping.
#
# Feature keys come in four shapes:
#   - structural markers:  "<svg>", "<form>", "<style>", "<link>", "<video>"
#   - at-rules:            "@font-face", "@media"
#   - plain properties:    "color", "border-radius"
#   - compound keys:       "display:flex", "display:grid", "linear-gradient"
#
# Compound keys are looked up as-is. "display:grid" is never decomposed
# back into "display".
# =============================================================================

import tomllib
from enum import Enum
from functools import cache
from importlib import resources
from typing import Mapping


class SupportLevel(Enum):
    """How well an engine handles a feature."""
    SUPPORTED = "supported"
    PARTIAL = "partial"
    UNSUPPORTED = "unsupported"
    UNKNOWN = "unknown"     # No data. Never a reason to warn.


# Compound keys derived from a specific value of a generic property
DISPLAY_FLEX = "display:flex"
DISPLAY_GRID = "display:grid"
GRADIENT = "linear-gradient"

COMPOUND_FEATURES = frozenset({DISPLAY_FLEX, DISPLAY_GRID, GRADIENT})

# Features whose fix means rebuilding markup rather than swapping a value.
# This set alone decides FixType for every warning.
STRUCTURAL_FEATURES = frozenset({
    "display:flex",
    "display:grid",
    "word-break",
    "overflow-wrap",
    "text-overflow",
    "position",
    "float",
    "gap",
    "max-width",
    "border-radius",
    "background-image",
    "background-size",
    "background-position",
    "<svg>",
    "<video>",
    "<form>",
    "object-fit",
})


def is_structural(feature: str) -> bool:
    """True when fixing the feature needs a markup change."""
    return feature in STRUCTURAL_FEATURES


# -----------------------------------------------------------------------------
# Properties individual engines drop from inline styles
# -----------------------------------------------------------------------------

GMAIL_STRIPPED_PROPERTIES = frozenset({
    "position", "overflow", "visibility", "opacity",
    "box-shadow", "text-shadow", "transform", "animation",
    "transition", "box-sizing", "object-fit", "gap",
})

# Outlook on Windows lays out mail with Word's HTML engine
OUTLOOK_WORD_UNSUPPORTED = frozenset({
    "border-radius", "box-shadow", "text-shadow",
    "max-width", "max-height", "min-width", "min-height",
    "float", "position", "display", "overflow", "opacity",
    "transform", "animation", "transition",
    "background-size", "background-position", "box-sizing",
    "object-fit", "gap", "word-break", "overflow-wrap",
    "text-overflow", "border-spacing",
})


# =============================================================================
# Matrix
# =============================================================================

class SupportMatrix:
    """
    Read-only lookup over the curated support table.

    Usage:
        >>> matrix = SupportMatrix({"gap": {"gmail-web": "unsupported"}})
        >>> matrix.level("gap", "gmail-web")
        <SupportLevel.UNSUPPORTED: 'unsupported'>
        >>> matrix.level("gap", "thunderbird")
        <SupportLevel.UNKNOWN: 'unknown'>
    """

    def __init__(self, table: Mapping[str, Mapping[str, str]]):
        self._table: dict[str, dict[str, SupportLevel]] = {
            feature: {
                engine_id: SupportLevel(level)
                for engine_id, level in engines.items()
            }
            for feature, engines in table.items()
        }

    def __contains__(self, feature: str) -> bool:
        return feature in self._table

    def __len__(self) -> int:
        return len(self._table)

    def features(self) -> list[str]:
        return list(self._table)

    def level(self, feature: str, engine_id: str) -> SupportLevel:
        """
        Support level for an exact feature key on one engine.

        Missing features and missing engine entries are both UNKNOWN.
        """
        engines = self._table.get(feature)
        if engines is None:
            return SupportLevel.UNKNOWN
        return engines.get(engine_id, SupportLevel.UNKNOWN)

    @classmethod
    def from_toml(cls, text: str) -> "SupportMatrix":
        """Build a matrix from the text of a support table file."""
        data = tomllib.loads(text)
        return cls(data.get("features", {}))


@cache
def default_matrix() -> SupportMatrix:
    """The bundled support table, parsed once per process."""
    text = resources.files("mailcompat.rules").joinpath(
        "data", "support.toml"
    ).read_text(encoding="utf-8")
    return SupportMatrix.from_toml(text)


def get_support(feature: str, engine_id: str) -> SupportLevel:
    """Shorthand for default_matrix().level(...)."""
    return default_matrix().level(feature, engine_id)
