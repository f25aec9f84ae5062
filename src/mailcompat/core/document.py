# =============================================================================
# Document Input
# =============================================================================
# Every public operation funnels its HTML through here first:
#
#   1. is_blank()          - empty / whitespace-only input short-circuits
#   2. check_input_size()  - the one fatal precondition, checked before parsing
#   3. parse_document()    - a fresh BeautifulSoup tree (lxml parser)
#
# Analyses may share one parse because they only read it. Transforms always
# call parse_document() again because they mutate the tree.
# =============================================================================

from bs4 import BeautifulSoup, Tag


# 2 MiB, measured in UTF-8 bytes
MAX_HTML_BYTES = 2 * 1024 * 1024


def is_blank(html: str | None) -> bool:
    """True for None, "" and whitespace-only input."""
    return not html or not html.strip()


def check_input_size(html: str, limit: int = MAX_HTML_BYTES) -> None:
    """
    Reject input larger than the size ceiling.

    Args:
        html: The raw document.
        limit: Ceiling in bytes. Callers with their own configured ceiling
               pass it here.

    Raises:
        InputTooLargeError: If the UTF-8 encoding of html exceeds limit.
    """
    size = len(html.encode("utf-8"))
    if size > limit:
        raise InputTooLargeError(size, limit)


def parse_document(html: str) -> BeautifulSoup:
    """Parse HTML into a new, independent tree."""
    return BeautifulSoup(html, "lxml")


def describe_element(tag: Tag) -> str:
    """
    Short descriptor for an element, used as warning context.

    Examples:
        <div id="hero" class="card wide"> -> "div#hero.card.wide"
        <td> -> "td"
    """
    descriptor = tag.name
    element_id = tag.get("id")
    if element_id:
        descriptor += f"#{element_id}"
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    for cls in classes:
        descriptor += f".{cls}"
    return descriptor


# =============================================================================
# Exceptions
# =============================================================================

class InputTooLargeError(ValueError):
    """Raised when a document exceeds the input size ceiling."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"HTML input exceeds {limit // 1024}KB limit.")
