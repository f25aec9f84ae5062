# =============================================================================
# Remediation Resolver
# =============================================================================
# Finds the best advice for a (feature, engine, framework) combination.
#
# Suggestions and code fixes are both keyed the same way and searched most
# specific first. The first tier with an entry wins:
#
#   tier 1  "feature::family::framework"   e.g. "display:flex::outlook::jsx"
#   tier 2  "feature::framework"           e.g. "display:grid::mjml"
#   tier 3  "feature::family"              e.g. "border-radius::outlook"
#   tier 4  "feature"                      generic advice
#
# The family comes from the engine (see core.engines.family_prefix). Tiers
# that need a family or a framework are skipped when there is none.
#
# A suggestion is always returned: when no tier has one, a generic
# "not supported" sentence stands in. Code fixes are optional.
# =============================================================================

import tomllib
from dataclasses import dataclass
from functools import cache
from importlib import resources
from types import MappingProxyType
from typing import Iterator, Mapping

from mailcompat.core.engines import family_prefix
from mailcompat.core.models import CodeFix, Framework

# Tiers whose advice is not written for a particular framework
GENERIC_TIERS = frozenset({3, 4})


@dataclass(frozen=True)
class Resolution:
    """
    Outcome of a remediation lookup.

    Attributes:
        suggestion: Advice text. Never empty.
        fix: Before/after snippet, if any tier had one.
        is_generic_fallback: A framework was requested but the advice is
                             not specific to it.
        suggestion_tier: Tier the suggestion came from (None = default text).
        fix_tier: Tier the fix came from (None = no fix).
    """
    suggestion: str
    fix: CodeFix | None
    is_generic_fallback: bool
    suggestion_tier: int | None = None
    fix_tier: int | None = None


def default_suggestion(feature: str) -> str:
    return f'"{feature}" is not supported in this email client.'


def candidate_keys(
    feature: str,
    prefix: str | None,
    framework: Framework | None,
) -> Iterator[tuple[int, str]]:
    """
    Lookup keys in tier order, as (tier, key) pairs.

    Examples:
        >>> list(candidate_keys("gap", "gmail", None))
        [(3, 'gap::gmail'), (4, 'gap')]
    """
    fw = framework.value if framework else None
    if prefix and fw:
        yield 1, f"{feature}::{prefix}::{fw}"
    if fw:
        yield 2, f"{feature}::{fw}"
    if prefix:
        yield 3, f"{feature}::{prefix}"
    yield 4, feature


class RemedyCatalog:
    """
    Suggestion and fix tables with tiered lookup.

    The bundled tables come from default_catalog(); tests and callers with
    their own advice can build one directly.

    Usage:
        >>> catalog = RemedyCatalog({"gap": "Use padding."}, {})
        >>> catalog.resolve("gap", "gmail-web").suggestion
        'Use padding.'
    """

    def __init__(
        self,
        suggestions: Mapping[str, str],
        fixes: Mapping[str, CodeFix],
    ):
        # Read-only views: default_catalog() is shared by every caller
        self._suggestions = MappingProxyType(dict(suggestions))
        self._fixes = MappingProxyType(dict(fixes))

    @property
    def suggestions(self) -> Mapping[str, str]:
        return self._suggestions

    @property
    def fixes(self) -> Mapping[str, CodeFix]:
        return self._fixes

    def resolve(
        self,
        feature: str,
        engine_id: str,
        framework: Framework | str | None = None,
        *,
        suggestion_feature: str | None = None,
    ) -> Resolution:
        """
        Resolve advice for one feature on one engine.

        Args:
            feature: Feature key used for the code fix (and the suggestion,
                     unless suggestion_feature is given).
            engine_id: Concrete engine id; its family drives tiers 1 and 3.
            framework: Authoring framework, if any.
            suggestion_feature: Alternate key for the suggestion text only,
                                e.g. "<style>:partial" for partial support.

        Returns:
            A Resolution whose suggestion is never empty.

        Raises:
            ValueError: If framework is a string naming no known framework.
        """
        framework = Framework.coerce(framework)
        prefix = family_prefix(engine_id)

        suggestion, suggestion_tier = self._lookup(
            self._suggestions, suggestion_feature or feature, prefix, framework
        )
        if suggestion is None:
            suggestion = default_suggestion(suggestion_feature or feature)

        fix, fix_tier = self._lookup(self._fixes, feature, prefix, framework)

        # The default sentence counts as generic advice
        is_generic = framework is not None and (
            suggestion_tier is None
            or suggestion_tier in GENERIC_TIERS
            or (fix is not None and fix_tier in GENERIC_TIERS)
        )

        return Resolution(
            suggestion=suggestion,
            fix=fix,
            is_generic_fallback=is_generic,
            suggestion_tier=suggestion_tier,
            fix_tier=fix_tier,
        )

    @staticmethod
    def _lookup(table, feature, prefix, framework):
        for tier, key in candidate_keys(feature, prefix, framework):
            value = table.get(key)
            if value:
                return value, tier
        return None, None

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    @classmethod
    def from_toml(cls, suggestions_text: str, fixes_text: str) -> "RemedyCatalog":
        """Build a catalog from the text of the two remediation files."""
        suggestions = tomllib.loads(suggestions_text).get("suggestions", {})
        fixes = {
            key: CodeFix(
                before=entry["before"],
                after=entry["after"],
                language=entry["language"],
                description=entry["description"],
            )
            for key, entry in tomllib.loads(fixes_text).get("fixes", {}).items()
        }
        return cls(suggestions, fixes)


@cache
def default_catalog() -> RemedyCatalog:
    """The bundled remediation tables, parsed once per process."""
    data = resources.files("mailcompat.remedies").joinpath("data")
    return RemedyCatalog.from_toml(
        data.joinpath("suggestions.toml").read_text(encoding="utf-8"),
        data.joinpath("fixes.toml").read_text(encoding="utf-8"),
    )


def resolve_fix(
    feature: str,
    engine_id: str,
    framework: Framework | str | None = None,
    *,
    suggestion_feature: str | None = None,
) -> Resolution:
    """
    Resolve remediation advice from the bundled tables.

    Usage:
        >>> resolve_fix("border-radius", "outlook-windows").fix.language
        'html'
    """
    return default_catalog().resolve(
        feature, engine_id, framework, suggestion_feature=suggestion_feature
    )
