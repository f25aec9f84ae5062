# =============================================================================
# mailcompat: HTML Email Compatibility Engine
# =============================================================================
#
# Mail clients quietly drop, rewrite or half-honour the HTML and CSS they
# are sent. mailcompat works out what each of a dozen rendering engines
# (Gmail, Outlook on Word, Apple Mail, Yahoo, ...) will do to a message.
#
# Features:
#   - Feature detection over <style> blocks and inline styles
#   - Per-engine warnings backed by a curated support matrix
#   - Remediation advice and copy-paste fixes, tailored to JSX, MJML or
#     Maizzle sources where available
#   - 0-100 compatibility score per engine, and before/after diffs
#   - Per-engine rewritten copy of the document (inlining, stripping)
#
# Nothing is rendered and no mail client is contacted: everything comes
# from the bundled support data.
# =============================================================================

__version__ = "0.1.0"
__app_name__ = "mailcompat"

from mailcompat.analysis.features import detect_features
from mailcompat.analysis.scoring import diff_scores, score
from mailcompat.analysis.warnings import generate_warnings
from mailcompat.core.document import InputTooLargeError
from mailcompat.core.engines import ENGINES, get_engine
from mailcompat.core.models import (
    CodeFix,
    EngineWarning,
    Framework,
    Severity,
    TransformResult,
)
from mailcompat.remedies.resolver import resolve_fix
from mailcompat.rules.support import SupportLevel
from mailcompat.transform.pipeline import transform_for_all_engines, transform_for_engine

# Main entry point - this is what gets called by the 'mailcompat' command
from mailcompat.cli import main

__all__ = [
    "__version__",
    "__app_name__",
    "main",
    "detect_features",
    "generate_warnings",
    "score",
    "diff_scores",
    "resolve_fix",
    "transform_for_engine",
    "transform_for_all_engines",
    "ENGINES",
    "get_engine",
    "Framework",
    "Severity",
    "SupportLevel",
    "EngineWarning",
    "CodeFix",
    "TransformResult",
    "InputTooLargeError",
]
