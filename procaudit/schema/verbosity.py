"""Output verbosity levels."""
from __future__ import annotations

from enum import Enum

from procaudit.errors import ConfigError


class Verbosity(str, Enum):
    """How much the validator reports.

    ``none`` reports nothing, ``quiet`` reports failures only, ``normal``
    adds progress and the final summary, ``verbose`` adds per-object detail.
    """

    NONE = "none"
    QUIET = "quiet"
    NORMAL = "normal"
    VERBOSE = "verbose"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def at_least(self, other: "Verbosity") -> bool:
        """True if this level reports everything ``other`` reports."""
        return self.rank >= other.rank

    @classmethod
    def parse(cls, value: "str | Verbosity") -> "Verbosity":
        """Parse a level name or the abbreviations ``q``, ``n`` and ``v``.

        ``none`` has no abbreviation; ``n`` means ``normal``.

        Raises:
            ConfigError: If ``value`` names no known level.
        """
        if isinstance(value, Verbosity):
            return value
        token = str(value).strip().lower()
        level = _ABBREVIATIONS.get(token)
        if level is not None:
            return level
        for level in cls:
            if token == level.value:
                return level
        raise ConfigError(
            f"Verbosity must be one of {[v.value for v in cls]}, got {value!r}.",
            setting="verbosity",
        )


_ABBREVIATIONS = {
    "q": Verbosity.QUIET,
    "n": Verbosity.NORMAL,
    "v": Verbosity.VERBOSE,
}

_RANKS = {
    Verbosity.NONE: 0,
    Verbosity.QUIET: 1,
    Verbosity.NORMAL: 2,
    Verbosity.VERBOSE: 3,
}
