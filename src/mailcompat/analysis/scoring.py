# =============================================================================
# Compatibility Scoring
# =============================================================================
# Reduces a warning list to a 0-100 score per engine:
#
#   score = clamp(100 - 15 * errors - 5 * warnings - 1 * info, 0, 100)
#
# An engine with no warnings scores exactly 100.
#
# diff_scores() compares two warning lists (say, before and after a fix)
# engine by engine. Warnings are matched on (feature, severity), so a
# message rewording does not count as a change.
# =============================================================================

from dataclasses import dataclass, field
from typing import Any, Iterable

from mailcompat.core.engines import ENGINES, EngineProfile
from mailcompat.core.models import EngineWarning, Severity

ERROR_PENALTY = 15
WARNING_PENALTY = 5
INFO_PENALTY = 1


@dataclass(frozen=True)
class EngineScore:
    """Score and severity counts for one engine."""
    engine_id: str
    score: int
    errors: int = 0
    warnings: int = 0
    info: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "engine_id": self.engine_id,
            "score": self.score,
            "errors": self.errors,
            "warnings": self.warnings,
            "info": self.info,
        }


@dataclass
class ScoreDiff:
    """
    How one engine's results changed between two analyses.

    Attributes:
        fixed: Warnings present before but not after.
        introduced: Warnings present after but not before.
        unchanged: Warnings present in both (the "after" copies).
    """
    engine_id: str
    score_before: int
    score_after: int
    fixed: list[EngineWarning] = field(default_factory=list)
    introduced: list[EngineWarning] = field(default_factory=list)
    unchanged: list[EngineWarning] = field(default_factory=list)

    @property
    def score_delta(self) -> int:
        return self.score_after - self.score_before

    def to_dict(self) -> dict[str, Any]:
        return {
            "engine_id": self.engine_id,
            "score_before": self.score_before,
            "score_after": self.score_after,
            "score_delta": self.score_delta,
            "fixed": [w.to_dict() for w in self.fixed],
            "introduced": [w.to_dict() for w in self.introduced],
            "unchanged": [w.to_dict() for w in self.unchanged],
        }


def compute_score(errors: int, warnings: int, info: int) -> int:
    """
    Apply the penalty formula.

    Examples:
        >>> compute_score(1, 2, 3)
        72
        >>> compute_score(10, 0, 0)
        0
    """
    raw = 100 - ERROR_PENALTY * errors - WARNING_PENALTY * warnings - INFO_PENALTY * info
    return max(0, min(100, raw))


def score(
    warnings: Iterable[EngineWarning],
    engines: Iterable[EngineProfile] = ENGINES,
) -> dict[str, EngineScore]:
    """
    Score every engine in the catalog.

    Args:
        warnings: Any warning list (analysis or transform output).
        engines: The engines to score.

    Returns:
        engine id -> EngineScore, in catalog order.
    """
    counts: dict[str, dict[Severity, int]] = {}
    for warning in warnings:
        per_engine = counts.setdefault(warning.engine_id, {})
        per_engine[warning.severity] = per_engine.get(warning.severity, 0) + 1

    result = {}
    for engine in engines:
        engine_counts = counts.get(engine.id, {})
        errors = engine_counts.get(Severity.ERROR, 0)
        warns = engine_counts.get(Severity.WARNING, 0)
        info = engine_counts.get(Severity.INFO, 0)
        result[engine.id] = EngineScore(
            engine_id=engine.id,
            score=compute_score(errors, warns, info),
            errors=errors,
            warnings=warns,
            info=info,
        )
    return result


def diff_scores(
    before: list[EngineWarning],
    after: list[EngineWarning],
    engines: Iterable[EngineProfile] = ENGINES,
) -> list[ScoreDiff]:
    """
    Compare two warning lists engine by engine.

    Returns:
        One ScoreDiff per engine, in catalog order.
    """
    engines = list(engines)
    scores_before = score(before, engines)
    scores_after = score(after, engines)

    diffs = []
    for engine in engines:
        old = [w for w in before if w.engine_id == engine.id]
        new = [w for w in after if w.engine_id == engine.id]
        old_keys = {_match_key(w) for w in old}
        new_keys = {_match_key(w) for w in new}

        diffs.append(ScoreDiff(
            engine_id=engine.id,
            score_before=scores_before[engine.id].score,
            score_after=scores_after[engine.id].score,
            fixed=[w for w in old if _match_key(w) not in new_keys],
            introduced=[w for w in new if _match_key(w) not in old_keys],
            unchanged=[w for w in new if _match_key(w) in old_keys],
        ))
    return diffs


def _match_key(warning: EngineWarning) -> tuple[str, Severity]:
    return (warning.feature, warning.severity)
