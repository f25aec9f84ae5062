# =============================================================================
# mailcompat Remedies Module
# =============================================================================
# Suggestion text and copy-paste code fixes for compatibility problems,
# resolved per engine family and authoring framework.
# =============================================================================

from mailcompat.remedies.resolver import (
    RemedyCatalog,
    Resolution,
    default_catalog,
    resolve_fix,
)

__all__ = [
    "RemedyCatalog",
    "Resolution",
    "default_catalog",
    "resolve_fix",
]
