"""procaudit validation orchestration."""
from procaudit.validate.validator import DatabaseValidator

__all__ = ["DatabaseValidator"]
