# =============================================================================
# Engine Family Transformers
# =============================================================================
# One Transformer subclass per engine family. Most of the behaviour is
# declared through class attributes; the hooks add the checks that don't
# fit the common steps.
#
#   Family            Inlines <style>  Strips            Extra checks
#   ---------------   ---------------  ----------------  -------------------
#   Gmail             yes              link, form, svg   web fonts, MSO
#   Outlook desktop   no               -                 VML / Word layout
#   Outlook web       no               -                 -
#   Apple Mail        no               -                 dark-mode images
#   Yahoo             no               -                 class renaming
#   Samsung           no               - (info only)     -
#   Thunderbird       no               -                 animation
#   HEY               no               link, form        dark mode
#   Superhuman        no               link, form        reduced motion
# =============================================================================

from bs4 import Comment

from mailcompat.core.engines import EngineFamily
from mailcompat.core.models import Severity
from mailcompat.rules.support import GMAIL_STRIPPED_PROPERTIES, OUTLOOK_WORD_UNSUPPORTED
from mailcompat.transform.base import (
    StripMode,
    Transformer,
    TransformRun,
    uses_animation,
    uses_at_rule,
    value_strip,
)

_GRADIENT = r"linear-gradient|radial-gradient"

# Comment markers for content only Outlook should see
_MSO_COMMENT_MARKERS = ("<style", "[if mso]", "[if gte mso")


class GmailTransformer(Transformer):
    """
    Gmail (web and apps): inlines what it can, then drops <style>.

    Styles survive only as inline attributes, and a fixed list of layout
    and effect properties is removed from those.
    """

    family = EngineFamily.GMAIL
    stripped_properties = GMAIL_STRIPPED_PROPERTIES
    value_strips = (
        value_strip("display", r"grid"),
        value_strip("background", _GRADIENT),
    )
    inline_and_strip_styles = True
    strip_stylesheet_links = True
    strip_forms = True
    strip_svg = True

    def before_strip(self, run: TransformRun) -> None:
        # Must look before the <style> blocks are gone
        if uses_at_rule(run.soup, "@font-face"):
            run.warn(
                Severity.WARNING, "@font-face",
                f"{run.engine.name} does not support custom web fonts.",
            )

    def after_strip(self, run: TransformRun) -> None:
        for comment in run.soup.find_all(string=lambda text: isinstance(text, Comment)):
            if any(marker in comment for marker in _MSO_COMMENT_MARKERS):
                comment.extract()

        run.warn(
            Severity.INFO, "<style>",
            f"{run.engine.name} partially supports <style> blocks "
            f"(head only, 16KB limit). Inlining recommended for safety.",
            suggestion_feature="<style>:partial",
        )


class OutlookDesktopTransformer(Transformer):
    """
    Outlook for Windows, which lays mail out with Microsoft Word.

    The layout checks run on the untouched tree: once the strip step has
    removed border-radius and display there is nothing left to find.
    """

    family = EngineFamily.OUTLOOK_DESKTOP
    stripped_properties = OUTLOOK_WORD_UNSUPPORTED
    value_strips = (
        value_strip("background", _GRADIENT),
        value_strip("background-image", _GRADIENT),
    )

    def before_strip(self, run: TransformRun) -> None:
        soup = run.soup
        name = run.engine.name

        if soup.select_one("[style*='border-radius']"):
            run.warn(
                Severity.WARNING, "border-radius",
                f"{name} ignores border-radius. Buttons and containers "
                f"will have sharp corners.",
            )

        if soup.select_one("[style*='max-width']"):
            run.warn(Severity.WARNING, "max-width", f"{name} ignores max-width.")

        if soup.select_one("div[style*='display'], div[style*='flex'], div[style*='grid']"):
            run.warn(
                Severity.ERROR, "display:flex",
                f"{name} uses Microsoft Word for rendering. Flexbox and Grid "
                f"layouts will break.",
            )

        if soup.select_one("[style*='background-image']") or _has_background_url(soup):
            run.warn(
                Severity.WARNING, "background-image",
                f"{name} requires VML for background images.",
            )


class OutlookWebTransformer(Transformer):
    family = EngineFamily.OUTLOOK_WEB
    stripped_properties = frozenset({"position", "transform", "animation", "transition"})


class AppleMailTransformer(Transformer):
    """Apple Mail renders almost everything; dark mode is the catch."""

    family = EngineFamily.APPLE_MAIL

    def after_strip(self, run: TransformRun) -> None:
        for img in run.soup.find_all("img"):
            src = img.get("src", "")
            if src.endswith((".png", ".svg")):
                run.warn(
                    Severity.INFO, "dark-mode",
                    f"PNG/SVG images with transparent backgrounds may become "
                    f"invisible in {run.engine.name} dark mode.",
                    suggestion="Add a white background or padding around images, "
                               "or use dark-mode-friendly image variants.",
                )
                break


class YahooTransformer(Transformer):
    family = EngineFamily.YAHOO
    stripped_properties = frozenset({
        "position", "box-shadow", "transform", "animation", "transition", "opacity",
    })

    def after_strip(self, run: TransformRun) -> None:
        run.warn(
            Severity.INFO, "class",
            f"{run.engine.name} rewrites CSS class names with a prefix. "
            f"Class-based selectors in <style> blocks will still work but "
            f"the names change.",
            advice=False,
        )
        if _has_background_url(run.soup, prop_prefix="background"):
            run.warn(
                Severity.WARNING, "background-image",
                f"{run.engine.name} has inconsistent support for CSS background images.",
            )


class SamsungTransformer(Transformer):
    """Samsung Mail keeps everything; limited properties are only noted."""

    family = EngineFamily.SAMSUNG
    stripped_properties = frozenset({
        "box-shadow", "transform", "animation", "transition", "opacity",
    })
    strip_mode = StripMode.INFO


class ThunderbirdTransformer(Transformer):
    family = EngineFamily.THUNDERBIRD

    def after_strip(self, run: TransformRun) -> None:
        if uses_animation(run.soup):
            run.warn(
                Severity.INFO, "animation",
                f"{run.engine.name} does not support CSS animations or transitions.",
            )


class HeyTransformer(Transformer):
    family = EngineFamily.HEY
    stripped_properties = frozenset({"transform", "animation", "transition"})
    value_strips = (value_strip("position", r"fixed|sticky"),)
    strip_stylesheet_links = True
    strip_forms = True

    def after_strip(self, run: TransformRun) -> None:
        if "prefers-color-scheme" not in run.html:
            run.warn(
                Severity.INFO, "dark-mode",
                f"{run.engine.name} supports @media (prefers-color-scheme: dark). "
                f"Consider adding dark mode styles.",
                suggestion="Add a @media (prefers-color-scheme: dark) block "
                           "to optimize for HEY's audience.",
            )


class SuperhumanTransformer(Transformer):
    family = EngineFamily.SUPERHUMAN
    strip_stylesheet_links = True
    strip_forms = True

    def after_strip(self, run: TransformRun) -> None:
        name = run.engine.name
        if uses_animation(run.soup):
            run.warn(
                Severity.INFO, "animation",
                f"{name} may honor OS-level 'reduce motion' preferences, "
                f"disabling animations.",
                suggestion="Use @media (prefers-reduced-motion: reduce) "
                           "to provide static fallbacks.",
            )
        run.warn(
            Severity.INFO, "<style>",
            f"{name} uses Chromium rendering with excellent CSS support. "
            f"Flexbox, Grid, CSS variables, and modern properties all work.",
            advice=False,
        )


def _has_background_url(soup, prop_prefix: str = "background:") -> bool:
    """
    True if an element's style mentions prop_prefix and uses url().

    The default looks for the background shorthand only.
    """
    for element in soup.select(f"[style*='{prop_prefix}']"):
        if "url(" in element.get("style", ""):
            return True
    return False


# One stateless instance per family
TRANSFORMERS: dict[EngineFamily, Transformer] = {
    transformer.family: transformer
    for transformer in (
        GmailTransformer(),
        OutlookDesktopTransformer(),
        OutlookWebTransformer(),
        AppleMailTransformer(),
        YahooTransformer(),
        SamsungTransformer(),
        ThunderbirdTransformer(),
        HeyTransformer(),
        SuperhumanTransformer(),
    )
}


def get_transformer(family: EngineFamily) -> Transformer:
    return TRANSFORMERS[family]
