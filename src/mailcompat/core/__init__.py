# =============================================================================
# mailcompat Core Module
# =============================================================================
# Domain records, the engine catalog and the input guard. Nothing in here
# knows about CSS parsing or engine-specific behaviour.
#
#   - models:   Severity, CodeFix, EngineWarning, TransformResult
#   - engines:  EngineProfile catalog and family prefixes
#   - document: size ceiling, blank check, HTML parsing
# =============================================================================

from mailcompat.core.document import (
    MAX_HTML_BYTES,
    InputTooLargeError,
    check_input_size,
    is_blank,
    parse_document,
)
from mailcompat.core.engines import (
    ENGINES,
    EngineCategory,
    EngineFamily,
    EngineProfile,
    family_prefix,
    get_engine,
)
from mailcompat.core.models import (
    CodeFix,
    EngineWarning,
    FixType,
    Framework,
    Severity,
    TransformResult,
    sort_by_severity,
)

__all__ = [
    "MAX_HTML_BYTES",
    "InputTooLargeError",
    "check_input_size",
    "is_blank",
    "parse_document",
    "ENGINES",
    "EngineCategory",
    "EngineFamily",
    "EngineProfile",
    "family_prefix",
    "get_engine",
    "CodeFix",
    "EngineWarning",
    "FixType",
    "Framework",
    "Severity",
    "TransformResult",
    "sort_by_severity",
]
