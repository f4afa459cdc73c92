"""Custom exception hierarchy for procaudit.

All public errors inherit from ProcAuditError so callers can catch the base
class for any procaudit-specific failure.

Only fatal conditions are raised.  Per-object failures (unreadable
definitions, compile errors, probe errors) are recorded as diagnostics and
never surface as exceptions.
"""
from __future__ import annotations


class ProcAuditError(Exception):
    """Base exception for all procaudit errors."""


class ConfigError(ProcAuditError):
    """Raised when settings are missing or malformed.

    Args:
        message: Human-readable description.
        setting: Name of the offending setting, when known.
    """

    def __init__(self, message: str, setting: str | None = None) -> None:
        super().__init__(message)
        self.setting = setting


class DatabaseConnectionError(ProcAuditError):
    """Raised when the connection to the database cannot be opened."""


class EnumerationError(ProcAuditError):
    """Raised when the catalog cannot be listed.

    Aborts the whole pass; there is no partial enumeration.

    Args:
        message: Human-readable description.
        stage: ``"version"`` or ``"objects"``.
    """

    def __init__(self, message: str, stage: str) -> None:
        super().__init__(message)
        self.stage = stage


class VersionDetectionError(EnumerationError):
    """Raised when the server reports a version string that cannot be parsed.

    Args:
        raw: The raw ``productversion`` value.
    """

    def __init__(self, raw: object) -> None:
        super().__init__(
            f"Cannot determine major version from server version {raw!r}.",
            stage="version",
        )
        self.raw = raw


class SessionResetError(ProcAuditError):
    """Raised when the session cannot be returned to its baseline options.

    Every later check on the session would run with unknown NOEXEC /
    QUOTED_IDENTIFIER / ANSI_NULLS settings, so the pass stops here.
    """
