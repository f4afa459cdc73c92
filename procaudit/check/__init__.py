"""procaudit checks: compile validation, safety classification, probing."""
from procaudit.check.compiler import CompileValidator
from procaudit.check.prober import ExecutionProber, ProbeCall, build_probe_call
from procaudit.check.safety import (
    DANGEROUS_KEYWORDS,
    KeywordSafetyClassifier,
    SideEffectClassifier,
    is_side_effect_free,
)
from procaudit.check.type_registry import TypeRegistry

__all__ = [
    "CompileValidator",
    "DANGEROUS_KEYWORDS",
    "ExecutionProber",
    "KeywordSafetyClassifier",
    "ProbeCall",
    "SideEffectClassifier",
    "TypeRegistry",
    "build_probe_call",
    "is_side_effect_free",
]
