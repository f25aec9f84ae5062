# =============================================================================
# mailcompat Analysis Module
# =============================================================================
# Read-only analysis of a document:
#   - features: what the document uses
#   - warnings: what each engine will do about it
#   - scoring:  0-100 per engine, and before/after comparison
# =============================================================================

from mailcompat.analysis.features import (
    FeatureOccurrence,
    FeatureSet,
    FeatureSource,
    detect_features,
)
from mailcompat.analysis.scoring import EngineScore, ScoreDiff, diff_scores, score
from mailcompat.analysis.warnings import (
    WarningCollector,
    WarningGenerator,
    generate_warnings,
)

__all__ = [
    "FeatureOccurrence",
    "FeatureSet",
    "FeatureSource",
    "detect_features",
    "EngineScore",
    "ScoreDiff",
    "diff_scores",
    "score",
    "WarningCollector",
    "WarningGenerator",
    "generate_warnings",
]
