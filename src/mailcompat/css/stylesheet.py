# =============================================================================
# Stylesheet Parsing
# =============================================================================
# Turns the text of a <style> block into something the analyzer and the
# inliner can use, using tinycss2 for the actual CSS grammar.
#
# One pass over the tinycss2 tree collects:
#   - at_rules:      every at-rule name seen, e.g. {"@media", "@font-face"}
#   - declarations:  every declaration, including those nested in @media
#   - rules:         style rules (selector + declarations) for inlining
#
# tinycss2 never raises on bad input. It hands back ParseError nodes in
# place of anything it could not make sense of; those are logged at debug
# level and skipped, so a broken rule only costs us that rule.
# =============================================================================

import logging
from dataclasses import dataclass, field

import tinycss2

from mailcompat.css.declarations import Declaration

logger = logging.getLogger(__name__)


# At-rules whose block holds declarations rather than nested rules
_DECLARATION_AT_RULES = frozenset({
    "font-face",
    "page",
    "counter-style",
    "property",
    "viewport",
})


@dataclass
class StyleRule:
    """
    A qualified rule from a stylesheet.

    Attributes:
        selector: Selector list as written ("td.hero, .button").
        declarations: The rule's declarations in source order.
    """
    selector: str
    declarations: list[Declaration] = field(default_factory=list)

    @property
    def declaration_text(self) -> str:
        """Declarations rendered for a style attribute: "a: 1; b: 2"."""
        return "; ".join(str(decl) for decl in self.declarations)


@dataclass
class StyleSheet:
    """Everything collected from one <style> block."""
    at_rules: set[str] = field(default_factory=set)
    declarations: list[Declaration] = field(default_factory=list)
    rules: list[StyleRule] = field(default_factory=list)


def parse_style_block(css: str) -> StyleSheet:
    """
    Parse one <style> block.

    Args:
        css: The block's text content.

    Returns:
        A StyleSheet. Unparseable parts are simply missing from it.

    Usage:
        >>> sheet = parse_style_block("@media (max-width: 600px) { td { display: block } }")
        >>> sheet.at_rules
        {'@media'}
        >>> sheet.rules[0].selector
        'td'
    """
    sheet = StyleSheet()
    nodes = tinycss2.parse_stylesheet(css, skip_comments=True, skip_whitespace=True)
    _walk(nodes, sheet, in_keyframes=False)
    return sheet


def _walk(nodes: list, sheet: StyleSheet, in_keyframes: bool) -> None:
    for node in nodes:
        if node.type == "qualified-rule":
            declarations = _parse_declarations(node.content)
            sheet.declarations.extend(declarations)
            # Keyframe selectors ("from", "50%") are not element selectors
            if not in_keyframes:
                selector = tinycss2.serialize(node.prelude).strip()
                sheet.rules.append(StyleRule(selector, declarations))

        elif node.type == "at-rule":
            name = node.lower_at_keyword
            sheet.at_rules.add(f"@{name}")
            if node.content is None:
                continue
            if name in _DECLARATION_AT_RULES:
                sheet.declarations.extend(_parse_declarations(node.content))
            else:
                nested = tinycss2.parse_rule_list(
                    node.content, skip_comments=True, skip_whitespace=True
                )
                _walk(nested, sheet, in_keyframes or name.endswith("keyframes"))

        elif node.type == "error":
            logger.debug(f"Skipping unparseable CSS: {node.message}")


def _parse_declarations(content: list) -> list[Declaration]:
    declarations = []
    nodes = tinycss2.parse_declaration_list(
        content, skip_comments=True, skip_whitespace=True
    )
    for node in nodes:
        if node.type == "declaration":
            value = tinycss2.serialize(node.value).strip()
            if not value:
                continue
            if node.important:
                value += " !important"
            declarations.append(Declaration(node.lower_name, value))
        elif node.type == "error":
            logger.debug(f"Skipping unparseable declaration: {node.message}")
    return declarations
