# =============================================================================
# Transformer Base
# =============================================================================
# A Transformer rewrites a document the way one engine family would, and
# reports what it removed.
#
# Every transform follows the same steps, each switched on or off by class
# attributes on the family's subclass:
#
#   1. before_strip() hook          (family checks on the untouched tree)
#   2. inline <style> rules, then drop the <style> blocks
#   3. drop <link rel=stylesheet>
#   4. unwrap <form> elements to their contents
#   5. replace <svg> with a placeholder <img>
#   6. strip unsupported properties from style attributes
#   7. after_strip() hook           (family checks on the rewritten tree)
#
# Transformers hold no per-call state. Everything a single call touches
# lives on a TransformRun, so the same input always gives the same output.
# =============================================================================

import logging
import re
from dataclasses import dataclass
from enum import Enum

from bs4 import BeautifulSoup

from mailcompat.analysis.features import STYLESHEET_LINK_SELECTOR
from mailcompat.core.document import parse_document
from mailcompat.core.engines import EngineFamily, EngineProfile
from mailcompat.core.models import (
    EngineWarning,
    Framework,
    Severity,
    TransformResult,
    sort_by_severity,
)
from mailcompat.css.declarations import parse_inline_style, serialize_style
from mailcompat.css.stylesheet import parse_style_block
from mailcompat.remedies.resolver import GENERIC_TIERS, RemedyCatalog
from mailcompat.transform.inliner import inline_styles

logger = logging.getLogger(__name__)

SVG_PLACEHOLDER_ALT = "[SVG not supported]"


class StripMode(Enum):
    """What happens to a property an engine does not handle."""
    STRIP = "strip"     # Remove it and warn
    INFO = "info"       # Keep it, note limited support


@dataclass(frozen=True)
class ValueStrip:
    """
    Remove a property only when its value matches a pattern.

    For engines that handle a property in general but not particular
    values of it (display: flex works, display: grid does not).
    """
    prop: str
    pattern: re.Pattern

    def matches(self, prop: str, value: str) -> bool:
        return prop == self.prop and bool(self.pattern.search(value))


def value_strip(prop: str, pattern: str) -> ValueStrip:
    return ValueStrip(prop, re.compile(pattern, re.IGNORECASE))


class TransformRun:
    """
    State for a single transform call: the tree being rewritten and the
    warnings collected so far.

    Warnings are de-duplicated on (feature, severity): however many
    elements lose "position", the run reports it once.
    """

    def __init__(
        self,
        html: str,
        engine: EngineProfile,
        framework: Framework | None,
        catalog: RemedyCatalog,
    ):
        self.html = html
        self.soup: BeautifulSoup = parse_document(html)
        self.engine = engine
        self.framework = framework
        self.catalog = catalog
        self._warnings: list[EngineWarning] = []
        self._seen: set[tuple[str, Severity]] = set()

    @property
    def warnings(self) -> list[EngineWarning]:
        return self._warnings

    def warn(
        self,
        severity: Severity,
        feature: str,
        message: str,
        *,
        suggestion: str | None = None,
        suggestion_feature: str | None = None,
        advice: bool = True,
    ) -> None:
        """
        Record a warning for this run's engine.

        Args:
            severity: Warning severity.
            feature: Feature key the warning is about.
            message: Human-readable message.
            suggestion: Fixed suggestion text, replacing the resolved one.
                        A code fix is still looked up.
            suggestion_feature: Alternate key for the resolved suggestion.
            advice: False for purely informational notes with nothing to fix.
        """
        if (feature, severity) in self._seen:
            return
        self._seen.add((feature, severity))

        warning = EngineWarning(
            severity=severity,
            engine_id=self.engine.id,
            feature=feature,
            message=message,
        )
        if advice:
            resolution = self.catalog.resolve(
                feature, self.engine.id, self.framework,
                suggestion_feature=suggestion_feature,
            )
            warning.fix = resolution.fix
            if suggestion is None:
                warning.suggestion = resolution.suggestion
                warning.fix_is_generic_fallback = resolution.is_generic_fallback
            else:
                warning.suggestion = suggestion
                warning.fix_is_generic_fallback = (
                    self.framework is not None
                    and resolution.fix is not None
                    and resolution.fix_tier in GENERIC_TIERS
                )
        elif suggestion is not None:
            warning.suggestion = suggestion

        self._warnings.append(warning)


# =============================================================================
# Transformer
# =============================================================================

class Transformer:
    """
    Base class for engine-family transformers.

    Subclasses set the class attributes below and override the two hooks
    where the family needs extra checks.
    """

    family: EngineFamily

    # Properties removed from (or, in INFO mode, flagged in) inline styles
    stripped_properties: frozenset[str] = frozenset()
    strip_mode: StripMode = StripMode.STRIP
    value_strips: tuple[ValueStrip, ...] = ()

    # Structural behaviour
    inline_and_strip_styles: bool = False
    strip_stylesheet_links: bool = False
    strip_forms: bool = False
    strip_svg: bool = False

    def transform(
        self,
        html: str,
        engine: EngineProfile,
        framework: Framework | None,
        catalog: RemedyCatalog,
    ) -> TransformResult:
        """
        Rewrite a document for one engine of this family.

        The input must already be non-blank and size-checked; see
        transform.pipeline for the public entry point.
        """
        logger.debug(f"Transforming document for {engine.id}")
        run = TransformRun(html, engine, framework, catalog)

        self.before_strip(run)

        if self.inline_and_strip_styles:
            inline_styles(run.soup)
            for style in run.soup.find_all("style"):
                style.decompose()

        if self.strip_stylesheet_links:
            self._strip_stylesheet_links(run)
        if self.strip_forms:
            self._unwrap_forms(run)
        if self.strip_svg:
            self._replace_svg(run)
        if self.stripped_properties or self.value_strips:
            self._strip_properties(run)

        self.after_strip(run)

        return TransformResult(
            engine_id=engine.id,
            html=str(run.soup),
            warnings=sort_by_severity(run.warnings),
        )

    # -------------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------------

    def before_strip(self, run: TransformRun) -> None:
        """Checks that need the tree before anything is removed."""

    def after_strip(self, run: TransformRun) -> None:
        """Checks and clean-up on the rewritten tree."""

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------

    def _strip_stylesheet_links(self, run: TransformRun) -> None:
        links = run.soup.select(STYLESHEET_LINK_SELECTOR)
        if not links:
            return
        run.warn(
            Severity.ERROR, "<link>",
            f"{run.engine.name} does not load external stylesheets.",
        )
        for link in links:
            link.decompose()

    def _unwrap_forms(self, run: TransformRun) -> None:
        forms = run.soup.find_all("form")
        if not forms:
            return
        run.warn(
            Severity.ERROR, "<form>",
            f"{run.engine.name} removes form elements.",
        )
        for form in forms:
            form.unwrap()

    def _replace_svg(self, run: TransformRun) -> None:
        # Outermost only; nested <svg> goes with its parent
        svgs = [svg for svg in run.soup.find_all("svg") if svg.find_parent("svg") is None]
        if not svgs:
            return
        run.warn(
            Severity.ERROR, "<svg>",
            f"{run.engine.name} does not support inline SVG elements.",
        )
        for svg in svgs:
            svg.replace_with(run.soup.new_tag("img", alt=SVG_PLACEHOLDER_ALT))

    def _strip_properties(self, run: TransformRun) -> None:
        name = run.engine.name

        for element in run.soup.find_all(style=True):
            styles = parse_inline_style(element["style"])
            removed = []

            for prop, value in list(styles.items()):
                if prop in self.stripped_properties:
                    if self.strip_mode == StripMode.STRIP:
                        del styles[prop]
                        removed.append(prop)
                    else:
                        run.warn(
                            Severity.INFO, prop,
                            f'{name} has limited support for "{prop}".',
                        )
                    continue

                if any(vs.matches(prop, value) for vs in self.value_strips):
                    del styles[prop]
                    removed.append(prop)

            if not removed:
                continue

            if styles:
                element["style"] = serialize_style(styles)
            else:
                del element["style"]
            for prop in removed:
                run.warn(
                    Severity.WARNING, prop,
                    f'{name} strips "{prop}" from styles.',
                )


# =============================================================================
# Shared detection helpers
# =============================================================================

def _is_motion_property(prop: str) -> bool:
    return prop in ("animation", "transition") or prop.startswith(("animation-", "transition-"))


def uses_animation(soup: BeautifulSoup) -> bool:
    """True if any inline style or <style> block animates or transitions."""
    for element in soup.find_all(style=True):
        if any(_is_motion_property(p) for p in parse_inline_style(element["style"])):
            return True
    for style in soup.find_all("style"):
        sheet = parse_style_block(style.get_text())
        if any(_is_motion_property(d.name) for d in sheet.declarations):
            return True
    return False


def uses_at_rule(soup: BeautifulSoup, at_rule: str) -> bool:
    """True if any <style> block contains the given at-rule ("@font-face")."""
    return any(
        at_rule in parse_style_block(style.get_text()).at_rules
        for style in soup.find_all("style")
    )
