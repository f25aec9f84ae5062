# =============================================================================
# Warning Generation
# =============================================================================
# Cross-references detected features with the support matrix, engine by
# engine, and attaches remediation advice to every finding.
#
# Severity depends on what was found and where:
#
#   feature                     unsupported   partial
#   -------------------------   -----------   -------
#   <style>                     error         warning
#   <link>, <svg>, <form>       error         -
#   <video>                     warning       -
#   @font-face, @media          warning       -
#   inline property/compound    warning       info
#   stylesheet property         warning       -
#   stylesheet compound         warning       info
#
# "unknown" and "supported" never produce a warning.
#
# The list is de-duplicated as it is built: the first warning for an
# (engine, feature, severity) triple wins. It is then stably sorted by
# severity.
# =============================================================================

from typing import Iterable, Iterator

from bs4 import BeautifulSoup

from mailcompat.analysis.features import (
    FeatureOccurrence,
    FeatureSet,
    FeatureSource,
    detect_features,
)
from mailcompat.core.document import MAX_HTML_BYTES
from mailcompat.core.engines import ENGINES, EngineProfile
from mailcompat.core.models import EngineWarning, Framework, Severity, sort_by_severity
from mailcompat.remedies.resolver import RemedyCatalog, default_catalog
from mailcompat.rules.support import (
    COMPOUND_FEATURES,
    SupportLevel,
    SupportMatrix,
    default_matrix,
)

# Structural features: (severity when unsupported, message template)
_STRUCTURAL_MESSAGES = {
    "<link>": (Severity.ERROR, "{name} does not support external stylesheets."),
    "<svg>": (Severity.ERROR, "{name} does not support inline SVG."),
    "<video>": (Severity.WARNING, "{name} does not support <video> elements."),
    "<form>": (Severity.ERROR, "{name} strips form elements."),
}

_AT_RULE_MESSAGES = {
    "@font-face": "{name} does not support web fonts (@font-face).",
    "@media": "{name} does not support @media queries.",
}


class WarningCollector:
    """
    Ordered warning list that drops repeats of (engine, feature, severity).

    Usage:
        >>> collector = WarningCollector()
        >>> collector.add(warning)
        True
        >>> collector.add(warning)   # same triple
        False
    """

    def __init__(self) -> None:
        self._warnings: list[EngineWarning] = []
        self._seen: set[tuple[str, str, Severity]] = set()

    def add(self, warning: EngineWarning) -> bool:
        """Add a warning unless its triple was already seen."""
        if warning.key in self._seen:
            return False
        self._seen.add(warning.key)
        self._warnings.append(warning)
        return True

    def __iter__(self) -> Iterator[EngineWarning]:
        return iter(self._warnings)

    def __len__(self) -> int:
        return len(self._warnings)

    def sorted(self) -> list[EngineWarning]:
        """The collected warnings, errors first."""
        return sort_by_severity(self._warnings)


class WarningGenerator:
    """
    Turns a FeatureSet into warnings for a set of engines.

    The matrix and remediation catalog default to the bundled tables.
    """

    def __init__(
        self,
        framework: Framework | str | None = None,
        *,
        engines: Iterable[EngineProfile] = ENGINES,
        matrix: SupportMatrix | None = None,
        catalog: RemedyCatalog | None = None,
    ):
        self.framework = Framework.coerce(framework)
        self.engines = list(engines)
        self.matrix = matrix or default_matrix()
        self.catalog = catalog or default_catalog()

    def generate(self, features: FeatureSet) -> list[EngineWarning]:
        collector = WarningCollector()

        for occ in features.from_source(FeatureSource.STRUCTURE):
            self._check_structural(occ, collector)

        stylesheet = features.from_source(FeatureSource.STYLESHEET)
        for occ in stylesheet:
            if occ.feature in _AT_RULE_MESSAGES:
                self._check_at_rule(occ.feature, collector)

        for occ in features.from_source(FeatureSource.INLINE):
            self.check_support(occ.feature, collector, selector=occ.selector)

        for occ in stylesheet:
            if _is_plain_property(occ.feature):
                self._check_stylesheet_property(occ.feature, collector)
        for occ in stylesheet:
            if occ.feature in COMPOUND_FEATURES:
                self.check_support(occ.feature, collector)

        return collector.sorted()

    # -------------------------------------------------------------------------
    # Checks
    # -------------------------------------------------------------------------

    def check_support(
        self,
        feature: str,
        collector: WarningCollector,
        selector: str | None = None,
    ) -> None:
        """Unsupported -> warning, partial -> info, for every engine."""
        for engine in self.engines:
            level = self.matrix.level(feature, engine.id)
            if level == SupportLevel.UNSUPPORTED:
                collector.add(self._warning(
                    Severity.WARNING, engine, feature,
                    f'{engine.name} does not support "{feature}".',
                    selector=selector,
                ))
            elif level == SupportLevel.PARTIAL:
                collector.add(self._warning(
                    Severity.INFO, engine, feature,
                    f'{engine.name} has partial support for "{feature}".',
                    selector=selector,
                ))

    def _check_structural(self, occ: FeatureOccurrence, collector: WarningCollector) -> None:
        feature = occ.feature
        for engine in self.engines:
            level = self.matrix.level(feature, engine.id)

            if feature == "<style>":
                if level == SupportLevel.UNSUPPORTED:
                    collector.add(self._warning(
                        Severity.ERROR, engine, feature,
                        f"{engine.name} strips <style> blocks. Styles must be inlined.",
                    ))
                elif level == SupportLevel.PARTIAL:
                    collector.add(self._warning(
                        Severity.WARNING, engine, feature,
                        f"{engine.name} has partial <style> support "
                        f"(head only, with limitations). Inline styles recommended.",
                        suggestion_feature="<style>:partial",
                    ))
                continue

            if level == SupportLevel.UNSUPPORTED and feature in _STRUCTURAL_MESSAGES:
                severity, template = _STRUCTURAL_MESSAGES[feature]
                collector.add(self._warning(
                    severity, engine, feature, template.format(name=engine.name),
                ))

    def _check_at_rule(self, feature: str, collector: WarningCollector) -> None:
        template = _AT_RULE_MESSAGES[feature]
        for engine in self.engines:
            if self.matrix.level(feature, engine.id) == SupportLevel.UNSUPPORTED:
                collector.add(self._warning(
                    Severity.WARNING, engine, feature, template.format(name=engine.name),
                ))

    def _check_stylesheet_property(self, prop: str, collector: WarningCollector) -> None:
        for engine in self.engines:
            if self.matrix.level(prop, engine.id) == SupportLevel.UNSUPPORTED:
                collector.add(self._warning(
                    Severity.WARNING, engine, prop,
                    f'{engine.name} does not support "{prop}" in <style> blocks.',
                ))

    def _warning(
        self,
        severity: Severity,
        engine: EngineProfile,
        feature: str,
        message: str,
        *,
        selector: str | None = None,
        suggestion_feature: str | None = None,
    ) -> EngineWarning:
        resolution = self.catalog.resolve(
            feature, engine.id, self.framework,
            suggestion_feature=suggestion_feature,
        )
        return EngineWarning(
            severity=severity,
            engine_id=engine.id,
            feature=feature,
            message=message,
            suggestion=resolution.suggestion,
            fix=resolution.fix,
            fix_is_generic_fallback=resolution.is_generic_fallback,
            selector=selector,
        )


def _is_plain_property(feature: str) -> bool:
    return (
        feature not in COMPOUND_FEATURES
        and not feature.startswith("<")
        and not feature.startswith("@")
    )


def generate_warnings(
    document: str | BeautifulSoup,
    framework: Framework | str | None = None,
    *,
    engines: Iterable[EngineProfile] = ENGINES,
    limit: int = MAX_HTML_BYTES,
) -> list[EngineWarning]:
    """
    Analyze a document for every engine.

    Args:
        document: Raw HTML or an already parsed tree.
        framework: Authoring framework; only changes which advice is
                   attached, never which warnings fire.
        engines: Engines to report on (default: the whole catalog).
        limit: Input size ceiling in bytes.

    Returns:
        Severity-sorted, de-duplicated warnings. Empty for blank input.

    Raises:
        InputTooLargeError: If the document exceeds limit.
        ValueError: If framework names no known framework.
    """
    generator = WarningGenerator(framework, engines=engines)
    features = detect_features(document, limit=limit)
    return generator.generate(features)
