# =============================================================================
# Transform Pipeline
# =============================================================================
# Public entry points for rewriting a document per engine.
#
# Each call parses its own tree, so transforms for different engines share
# nothing and can run in any order (or in parallel at the call site).
# =============================================================================

import logging
from typing import Iterable

from mailcompat.core.document import MAX_HTML_BYTES, check_input_size, is_blank
from mailcompat.core.engines import ENGINES, EngineProfile, get_engine
from mailcompat.core.models import EngineWarning, Framework, Severity, TransformResult
from mailcompat.remedies.resolver import RemedyCatalog, default_catalog
from mailcompat.transform.engines import get_transformer

logger = logging.getLogger(__name__)


def transform_for_engine(
    html: str,
    engine_id: str,
    framework: Framework | str | None = None,
    *,
    limit: int = MAX_HTML_BYTES,
    catalog: RemedyCatalog | None = None,
) -> TransformResult:
    """
    Rewrite a document the way one engine would display it.

    Args:
        html: The document.
        engine_id: Catalog id of the target engine.
        framework: Authoring framework, for tailored advice.
        limit: Input size ceiling in bytes.
        catalog: Remediation tables (default: the bundled ones).

    Returns:
        A TransformResult with the full rewritten document. Blank input
        gives html="" and no warnings. An unknown engine id gives the input
        back unchanged with a single info warning.

    Raises:
        InputTooLargeError: If html exceeds limit.
        ValueError: If framework names no known framework.

    Usage:
        >>> result = transform_for_engine('<p style="position:absolute">x</p>', "gmail-web")
        >>> [w.feature for w in result.warnings if w.severity.value == "warning"]
        ['position']
    """
    framework = Framework.coerce(framework)

    if is_blank(html):
        return TransformResult(engine_id=engine_id, html="")
    check_input_size(html, limit)

    engine = get_engine(engine_id)
    if engine is None:
        logger.info(f"No transformation rules for engine {engine_id!r}")
        return TransformResult(
            engine_id=engine_id,
            html=html,
            warnings=[EngineWarning(
                severity=Severity.INFO,
                engine_id=engine_id,
                feature="unknown",
                message=f'No transformation rules available for engine "{engine_id}".',
            )],
        )

    transformer = get_transformer(engine.family)
    return transformer.transform(html, engine, framework, catalog or default_catalog())


def transform_for_all_engines(
    html: str,
    framework: Framework | str | None = None,
    *,
    engines: Iterable[EngineProfile] = ENGINES,
    limit: int = MAX_HTML_BYTES,
) -> list[TransformResult]:
    """Run transform_for_engine for every engine, in catalog order."""
    return [
        transform_for_engine(html, engine.id, framework, limit=limit)
        for engine in engines
    ]
