# =============================================================================
# mailcompat Rules Module
# =============================================================================
# Static compatibility knowledge: which engine supports which feature.
# =============================================================================

from mailcompat.rules.support import (
    STRUCTURAL_FEATURES,
    SupportLevel,
    SupportMatrix,
    default_matrix,
    get_support,
    is_structural,
)

__all__ = [
    "STRUCTURAL_FEATURES",
    "SupportLevel",
    "SupportMatrix",
    "default_matrix",
    "get_support",
    "is_structural",
]
