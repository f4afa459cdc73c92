"""procaudit catalog layer: enumeration, definitions, parameters."""
from procaudit.catalog.definition import DefinitionFetcher
from procaudit.catalog.enumerator import ObjectEnumerator, ServerVersion
from procaudit.catalog.parameters import ParameterIntrospector

__all__ = [
    "DefinitionFetcher",
    "ObjectEnumerator",
    "ParameterIntrospector",
    "ServerVersion",
]
