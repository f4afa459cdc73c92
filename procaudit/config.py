"""Settings for the validator, read from the environment or a ``.env`` file.

Environment variables use the ``PROCAUDIT_`` prefix::

    PROCAUDIT_CONNECTION_STRING="Driver={ODBC Driver 18 for SQL Server};Server=db;Database=app;Trusted_Connection=yes;"
    PROCAUDIT_VERBOSITY=quiet
    PROCAUDIT_EXECUTE=true

Command-line flags override these (see :mod:`procaudit.cli`).
"""
from __future__ import annotations

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from procaudit.errors import ConfigError
from procaudit.schema.verbosity import Verbosity


class ValidatorSettings(BaseSettings):
    """Inputs the validation engine consumes.

    Attributes:
        connection_string: SQLAlchemy URL or raw ODBC connection string.
        verbosity: Reporting level; accepts names or first letters.
        execute: Probe objects classified as side-effect free.
    """

    model_config = SettingsConfigDict(
        env_prefix="PROCAUDIT_",
        env_file=".env",
        extra="ignore",
    )

    connection_string: str | None = None
    verbosity: Verbosity = Verbosity.NORMAL
    execute: bool = False

    @field_validator("verbosity", mode="before")
    @classmethod
    def _parse_verbosity(cls, value: object) -> Verbosity:
        try:
            return Verbosity.parse(value)  # type: ignore[arg-type]
        except ConfigError as exc:
            # pydantic wraps ValueError into its own ValidationError.
            raise ValueError(str(exc)) from exc

    def require_connection_string(self) -> str:
        """Return the connection string.

        Raises:
            ConfigError: If none was configured.
        """
        if not self.connection_string:
            raise ConfigError(
                "No connection string found on the command line or in "
                "PROCAUDIT_CONNECTION_STRING.",
                setting="connection_string",
            )
        return self.connection_string
