# =============================================================================
# CSS Inliner
# =============================================================================
# Copies <style> rules onto the style="" attribute of every element they
# match, for engines that throw <style> blocks away.
#
# Rules are applied in the order they appear (block by block, rule by
# rule, including rules nested in @media and @supports). Each rule's
# declarations are appended after whatever the element already has, so a
# later rule beats an earlier one for the same property. Selector
# specificity is not considered: a later ".a" overrides an earlier "#b".
#
# Skipped:
#   - selectors with pseudo-classes or pseudo-elements (:hover, ::before),
#     which have no inline equivalent
#   - selectors the selector engine rejects (soupsieve raises)
#   - keyframe blocks
# =============================================================================

import logging
import re

from bs4 import BeautifulSoup
from soupsieve import SelectorSyntaxError

from mailcompat.css.stylesheet import parse_style_block

logger = logging.getLogger(__name__)

_ATTRIBUTE_SELECTOR = re.compile(r"\[[^\]]*\]")
_ESCAPED_CHAR = re.compile(r"\\.")
_PSEUDO_SELECTOR = re.compile(r":{1,2}[a-zA-Z-]")


def has_pseudo_selector(selector: str) -> bool:
    """
    True if a selector uses a pseudo-class or pseudo-element.

    Colons inside attribute selectors and escaped colons in names
    (Tailwind's ".sm\\:w-full") do not count.

    Examples:
        >>> has_pseudo_selector("a:hover")
        True
        >>> has_pseudo_selector("a[href^='mailto:x']")
        False
        >>> has_pseudo_selector(r".sm\\:w-full")
        False
    """
    plain = _ESCAPED_CHAR.sub("", _ATTRIBUTE_SELECTOR.sub("", selector))
    return bool(_PSEUDO_SELECTOR.search(plain))


def inline_styles(soup: BeautifulSoup) -> int:
    """
    Inline every <style> block of a tree into style attributes.

    The <style> elements themselves are left in place; removing them is
    the caller's decision.

    Args:
        soup: Tree to mutate.

    Returns:
        Number of (rule, element) applications made.
    """
    applied = 0

    for style in soup.find_all("style"):
        sheet = parse_style_block(style.get_text())

        for rule in sheet.rules:
            declarations = rule.declaration_text
            if not declarations:
                continue
            if has_pseudo_selector(rule.selector):
                logger.debug(f"Not inlining pseudo selector: {rule.selector}")
                continue

            try:
                matches = soup.select(rule.selector)
            except (SelectorSyntaxError, NotImplementedError) as e:
                logger.debug(f"Skipping selector {rule.selector!r}: {e}")
                continue

            for element in matches:
                existing = element.get("style", "").strip().rstrip(";").strip()
                element["style"] = f"{existing}; {declarations}" if existing else declarations
                applied += 1

    return applied
