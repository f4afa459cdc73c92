"""Results of validating objects and whole databases."""
from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, computed_field

from procaudit.schema.catalog import CatalogObject


@dataclass(frozen=True)
class ValidationOutcome:
    """Result of checking one object.

    Attributes:
        object: The object that was checked.
        compiled: Whether the non-committing compile succeeded.
        executed: Probe result, or ``None`` when no probe was attempted
            (execution disabled, compile failed, or classified unsafe).
        diagnostic: The ``FAILED`` line emitted for this object, if any.
    """

    object: CatalogObject
    compiled: bool
    executed: bool | None = None
    diagnostic: str | None = None

    @property
    def valid(self) -> bool:
        """An object is invalid if it failed to compile or its probe failed."""
        return self.compiled and self.executed is not False


class ValidationSummary(BaseModel):
    """Counters for one validation pass.

    Attributes:
        objects_processed: Every enumerated object, readable or not.
        invalid_objects: Objects that failed to compile or failed the probe.
        unreadable_objects: Objects whose definition could not be fetched.
    """

    model_config = ConfigDict(extra="forbid")

    objects_processed: int = 0
    invalid_objects: int = 0
    unreadable_objects: int = 0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def overall_pass(self) -> bool:
        return self.invalid_objects == 0


class ValidationReport(BaseModel):
    """Everything a validation pass produced.

    Attributes:
        summary: Final counters.
        diagnostics: Every ``FAILED`` / ``UNREADABLE`` line in emission order.
        outcomes: One entry per object that reached the compile check.
    """

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    summary: ValidationSummary = Field(default_factory=ValidationSummary)
    diagnostics: list[str] = Field(default_factory=list)
    outcomes: list[ValidationOutcome] = Field(default_factory=list)

    @property
    def invalid(self) -> list[ValidationOutcome]:
        return [o for o in self.outcomes if not o.valid]
