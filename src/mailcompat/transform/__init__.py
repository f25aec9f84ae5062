# =============================================================================
# mailcompat Transform Module
# =============================================================================
# Per-engine rewriting: what a document looks like after an engine has
# inlined, stripped and replaced what it doesn't support.
#
#   - inliner:  <style> rules -> style attributes
#   - base:     Transformer steps and per-call state
#   - engines:  one Transformer per engine family
#   - pipeline: transform_for_engine / transform_for_all_engines
# =============================================================================

from mailcompat.transform.base import StripMode, Transformer, TransformRun, ValueStrip
from mailcompat.transform.engines import TRANSFORMERS, get_transformer
from mailcompat.transform.inliner import has_pseudo_selector, inline_styles
from mailcompat.transform.pipeline import transform_for_all_engines, transform_for_engine

__all__ = [
    "StripMode",
    "Transformer",
    "TransformRun",
    "ValueStrip",
    "TRANSFORMERS",
    "get_transformer",
    "has_pseudo_selector",
    "inline_styles",
    "transform_for_all_engines",
    "transform_for_engine",
]
