"""Safety classification of object definitions before a live probe.

``SideEffectClassifier`` is the capability callers depend on.  The default,
:class:`KeywordSafetyClassifier`, is a deliberately crude substring scan: a
keyword inside an identifier or string literal (``UpdatedAt``,
``'EXECUTIVE'``) makes an object unsafe.  That bias toward *not* executing
is accepted; a tokenizing classifier can replace it without touching the
prober.
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

#: Keywords whose presence means the object may write or run other code.
DANGEROUS_KEYWORDS: tuple[str, ...] = (
    "UPDATE", "INSERT", "DELETE", "CREATE", "DROP", "EXEC", "EXECUTE",
)

_CREATE = "CREATE"


@runtime_checkable
class SideEffectClassifier(Protocol):
    """Classifies definition text as side-effect-free or not."""

    def is_side_effect_free(self, text: str) -> bool: ...


class KeywordSafetyClassifier:
    """Case-insensitive dangerous-keyword scan.

    The leading ``CREATE`` of the object's own defining statement is removed
    before scanning; any other occurrence still counts.

    Args:
        keywords: Keywords to scan for.  Defaults to :data:`DANGEROUS_KEYWORDS`.
    """

    def __init__(self, keywords: Iterable[str] = DANGEROUS_KEYWORDS) -> None:
        self.keywords = tuple(k.upper() for k in keywords)

    def is_side_effect_free(self, text: str) -> bool:
        normalized = text.upper()
        start = normalized.find(_CREATE)
        if start >= 0:
            normalized = normalized[:start] + normalized[start + len(_CREATE):]
        return not any(keyword in normalized for keyword in self.keywords)


def is_side_effect_free(text: str) -> bool:
    """Classify ``text`` with the default keyword scan."""
    return KeywordSafetyClassifier().is_side_effect_free(text)
