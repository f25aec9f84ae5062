# =============================================================================
# mailcompat CSS Module
# =============================================================================
# Two parsers for two grammars:
#   - declarations: the inside of a style="" attribute (hand-written tokenizer)
#   - stylesheet:   the inside of a <style> block (tinycss2)
# =============================================================================

from mailcompat.css.declarations import (
    Declaration,
    has_gradient,
    parse_declarations,
    parse_inline_style,
    serialize_style,
    split_declarations,
)
from mailcompat.css.stylesheet import StyleRule, StyleSheet, parse_style_block

__all__ = [
    "Declaration",
    "has_gradient",
    "parse_declarations",
    "parse_inline_style",
    "serialize_style",
    "split_declarations",
    "StyleRule",
    "StyleSheet",
    "parse_style_block",
]
