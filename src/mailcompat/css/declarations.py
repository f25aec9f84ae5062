# =============================================================================
# Inline Style Declarations
# =============================================================================
# Tokenizer for the contents of a style="..." attribute.
#
# Inline styles are a much smaller grammar than a stylesheet (no selectors,
# no at-rules, no blocks), so they get their own splitter instead of going
# through tinycss2. The one thing it must get right is where a declaration
# ends: a semicolon only counts when it is outside quotes and outside any
# parentheses. A naive split would break
#
#     background: url('a;b.png') no-repeat; color: red
#
# into three pieces instead of two.
# =============================================================================

from typing import NamedTuple


class Declaration(NamedTuple):
    """One property: value pair from an inline style."""
    name: str       # Lowercased property name
    value: str      # Value text, trimmed, including any !important

    def __str__(self) -> str:
        return f"{self.name}: {self.value}"


def split_declarations(style: str) -> list[str]:
    """
    Split a style attribute on top-level semicolons.

    Semicolons inside '...' or "..." strings and inside parentheses
    (url(), rgba(), nested calc()) do not end a declaration. A backslash
    inside a string escapes the next character. Empty pieces
    are dropped and every piece is trimmed.

    Examples:
        >>> split_declarations("color: red; background: url('a;b')")
        ['color: red', "background: url('a;b')"]
        >>> split_declarations(";;  ;")
        []
    """
    parts: list[str] = []
    current: list[str] = []
    quote: str | None = None
    escaped = False
    depth = 0

    for ch in style:
        if quote:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(0, depth - 1)
        elif ch == ";" and depth == 0:
            piece = "".join(current).strip()
            if piece:
                parts.append(piece)
            current = []
            continue
        current.append(ch)

    piece = "".join(current).strip()
    if piece:
        parts.append(piece)
    return parts


def parse_declarations(style: str) -> list[Declaration]:
    """
    Tokenize a style attribute into declarations, in source order.

    Pieces without a colon, or with an empty name or value, are skipped.
    Repeated properties are all kept.
    """
    declarations = []
    for part in split_declarations(style):
        name, colon, value = part.partition(":")
        if not colon:
            continue
        name = name.strip().lower()
        value = value.strip()
        if name and value:
            declarations.append(Declaration(name, value))
    return declarations


def parse_inline_style(style: str) -> dict[str, str]:
    """
    Map of property -> value.

    A repeated property keeps its first position and its last value, which
    is what a browser ends up using.
    """
    return {decl.name: decl.value for decl in parse_declarations(style)}


def serialize_style(styles: dict[str, str]) -> str:
    """Inverse of parse_inline_style: "a: 1; b: 2"."""
    return "; ".join(f"{name}: {value}" for name, value in styles.items())


def has_gradient(value: str) -> bool:
    """True if a declaration value uses a linear or radial gradient."""
    value = value.lower()
    return "linear-gradient" in value or "radial-gradient" in value
