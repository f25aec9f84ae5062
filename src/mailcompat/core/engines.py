# =============================================================================
# Engine Catalog
# =============================================================================
# The fixed list of mail-rendering engines we know how to reason about.
#
# Each engine belongs to a family: a group that strips, inlines and
# rewrites markup the same way (all Gmail apps, for instance). Families
# drive two things:
#   - which transformer rewrites a document for the engine
#   - which family-specific remediation advice applies ("::gmail")
#
# The catalog is immutable and looked up by id everywhere.
# =============================================================================

from dataclasses import dataclass
from enum import Enum


class EngineCategory(Enum):
    """Where the mail client runs."""
    WEBMAIL = "webmail"
    DESKTOP = "desktop"
    MOBILE = "mobile"


class EngineFamily(Enum):
    """Engines that share the same stripping and rewriting behaviour."""
    GMAIL = "gmail"
    OUTLOOK_DESKTOP = "outlook-desktop"
    OUTLOOK_WEB = "outlook-web"
    APPLE_MAIL = "apple-mail"
    YAHOO = "yahoo"
    SAMSUNG = "samsung"
    THUNDERBIRD = "thunderbird"
    HEY = "hey"
    SUPERHUMAN = "superhuman"


@dataclass(frozen=True)
class EngineProfile:
    """
    A mail-rendering engine.

    Attributes:
        id: Stable identifier used in the support matrix ("gmail-web").
        name: Display name ("Gmail").
        category: Webmail, desktop or mobile.
        rendering_engine: What actually lays out the HTML ("Microsoft Word").
        supports_dark_mode: Whether the client has a dark mode at all.
        family: Behavioural family, see EngineFamily.
    """
    id: str
    name: str
    category: EngineCategory
    rendering_engine: str
    supports_dark_mode: bool
    family: EngineFamily


ENGINES: tuple[EngineProfile, ...] = (
    EngineProfile("gmail-web", "Gmail", EngineCategory.WEBMAIL,
                  "Gmail Web", True, EngineFamily.GMAIL),
    EngineProfile("gmail-android", "Gmail Android", EngineCategory.MOBILE,
                  "Gmail Mobile", True, EngineFamily.GMAIL),
    EngineProfile("gmail-ios", "Gmail iOS", EngineCategory.MOBILE,
                  "Gmail Mobile", True, EngineFamily.GMAIL),
    EngineProfile("outlook-web", "Outlook 365", EngineCategory.WEBMAIL,
                  "Outlook Web", True, EngineFamily.OUTLOOK_WEB),
    EngineProfile("outlook-windows", "Outlook Windows", EngineCategory.DESKTOP,
                  "Microsoft Word", False, EngineFamily.OUTLOOK_DESKTOP),
    EngineProfile("apple-mail-macos", "Apple Mail", EngineCategory.DESKTOP,
                  "WebKit", True, EngineFamily.APPLE_MAIL),
    EngineProfile("apple-mail-ios", "Apple Mail iOS", EngineCategory.MOBILE,
                  "WebKit", True, EngineFamily.APPLE_MAIL),
    EngineProfile("yahoo-mail", "Yahoo Mail", EngineCategory.WEBMAIL,
                  "Yahoo", True, EngineFamily.YAHOO),
    EngineProfile("samsung-mail", "Samsung Mail", EngineCategory.MOBILE,
                  "Samsung", True, EngineFamily.SAMSUNG),
    EngineProfile("thunderbird", "Thunderbird", EngineCategory.DESKTOP,
                  "Gecko", False, EngineFamily.THUNDERBIRD),
    EngineProfile("hey-mail", "HEY Mail", EngineCategory.WEBMAIL,
                  "WebKit", True, EngineFamily.HEY),
    EngineProfile("superhuman", "Superhuman", EngineCategory.DESKTOP,
                  "Blink", True, EngineFamily.SUPERHUMAN),
)

_ENGINES_BY_ID = {engine.id: engine for engine in ENGINES}

# Remediation advice is keyed by these prefixes ("border-radius::outlook").
# Outlook on the web has no prefix: desktop Outlook advice does not apply.
_ADVICE_PREFIXES: dict[EngineFamily, str | None] = {
    EngineFamily.GMAIL: "gmail",
    EngineFamily.OUTLOOK_DESKTOP: "outlook",
    EngineFamily.OUTLOOK_WEB: None,
    EngineFamily.APPLE_MAIL: "apple",
    EngineFamily.YAHOO: "yahoo",
    EngineFamily.SAMSUNG: "samsung",
    EngineFamily.THUNDERBIRD: None,
    EngineFamily.HEY: None,
    EngineFamily.SUPERHUMAN: None,
}


def get_engine(engine_id: str) -> EngineProfile | None:
    """Look up an engine by id. Returns None for unknown ids."""
    return _ENGINES_BY_ID.get(engine_id)


def family_prefix(engine_id: str) -> str | None:
    """
    Returns the remediation prefix for an engine's family.

    Examples:
        >>> family_prefix("gmail-ios")
        'gmail'
        >>> family_prefix("outlook-web") is None
        True
    """
    engine = _ENGINES_BY_ID.get(engine_id)
    if engine is None:
        return None
    return _ADVICE_PREFIXES[engine.family]
