# =============================================================================
# Compatibility Models
# =============================================================================
# The records every other module produces or consumes:
#
#   - Severity: error > warning > info, with a sort rank
#   - Framework: the authoring dialect (jsx, mjml, maizzle) or none
#   - CodeFix: a literal before/after snippet pair (not an executable patch)
#   - EngineWarning: one compatibility finding for one engine
#   - TransformResult: a full rewritten copy of a document for one engine
#
# All of these are created fresh per call and thrown away once the caller
# is done with them. Nothing here is persisted.
# =============================================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from mailcompat.rules.support import is_structural


class Severity(Enum):
    """Warning severity, ordered from most to least serious."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        """Sort key: errors first, then warnings, then info."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.ERROR: 0,
    Severity.WARNING: 1,
    Severity.INFO: 2,
}


class Framework(str, Enum):
    """
    The dialect a document was authored in, when it is not plain HTML.

    Remediation advice is tailored to it where tailored advice exists.
    """
    JSX = "jsx"
    MJML = "mjml"
    MAIZZLE = "maizzle"

    @classmethod
    def coerce(cls, value: "Framework | str | None") -> "Framework | None":
        """
        Accept a Framework, its string value, or nothing.

        Raises:
            ValueError: For a string that names no known framework.
        """
        if value is None or value == "":
            return None
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(f.value for f in cls)
            raise ValueError(
                f"Unknown framework {value!r} (expected one of: {choices})"
            ) from None


class FixType(Enum):
    """
    What kind of change a fix needs.

    STRUCTURAL means the markup has to be rebuilt (tables instead of flexbox,
    images instead of SVG). CSS means swapping or adding a declaration.
    """
    CSS = "css"
    STRUCTURAL = "structural"


@dataclass(frozen=True)
class CodeFix:
    """
    A copy-paste remediation snippet.

    Attributes:
        before: Code showing the problem.
        after: Code showing the fix.
        language: What the snippet is written in
                  ("html", "css", "jsx", "mjml", "maizzle").
        description: One-line summary of the change.
    """
    before: str
    after: str
    language: str
    description: str

    def to_dict(self) -> dict[str, str]:
        return {
            "before": self.before,
            "after": self.after,
            "language": self.language,
            "description": self.description,
        }


@dataclass
class EngineWarning:
    """
    A single compatibility problem for a single rendering engine.

    Uniqueness within a warning list is enforced on
    (engine_id, feature, severity); see WarningCollector.

    Attributes:
        severity: How bad it is.
        engine_id: Catalog id of the affected engine (e.g. "gmail-web").
        feature: Feature key ("<svg>", "@media", "position", "display:flex").
        message: Human-readable description of the problem.
        suggestion: Remediation advice, if any.
        fix: Copy-paste before/after snippet, if one exists.
        fix_is_generic_fallback: True when a framework was requested but the
                                 advice is not specific to it.
        selector: Short descriptor of the element that triggered the warning.
    """
    severity: Severity
    engine_id: str
    feature: str
    message: str
    suggestion: str | None = None
    fix: CodeFix | None = None
    fix_is_generic_fallback: bool = False
    selector: str | None = None

    @property
    def fix_type(self) -> FixType:
        """Derived from the structural feature set, never set per warning."""
        return FixType.STRUCTURAL if is_structural(self.feature) else FixType.CSS

    @property
    def key(self) -> tuple[str, str, Severity]:
        """The de-duplication key."""
        return (self.engine_id, self.feature, self.severity)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation. Optional fields are omitted when empty."""
        data: dict[str, Any] = {
            "severity": self.severity.value,
            "engine_id": self.engine_id,
            "feature": self.feature,
            "message": self.message,
            "fix_type": self.fix_type.value,
        }
        if self.suggestion is not None:
            data["suggestion"] = self.suggestion
        if self.fix is not None:
            data["fix"] = self.fix.to_dict()
        if self.fix_is_generic_fallback:
            data["fix_is_generic_fallback"] = True
        if self.selector is not None:
            data["selector"] = self.selector
        return data


@dataclass
class TransformResult:
    """
    Result of rewriting a document for one engine.

    Attributes:
        engine_id: Engine the document was rewritten for.
        html: The full rewritten document (never a diff).
        warnings: Everything the rewrite removed or flagged.
    """
    engine_id: str
    html: str
    warnings: list[EngineWarning] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "engine_id": self.engine_id,
            "html": self.html,
            "warnings": [w.to_dict() for w in self.warnings],
        }


def sort_by_severity(warnings: list[EngineWarning]) -> list[EngineWarning]:
    """Stable sort: errors, then warnings, then info."""
    return sorted(warnings, key=lambda w: w.severity.rank)
