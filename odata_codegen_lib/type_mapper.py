"""
Mapping of OData type descriptors onto an abstract scalar kind.

A descriptor is classified once into a ``TypeDescriptor`` (scalar kind plus
collection depth); each target backend renders that classification through
its own table, so condition logic lives in exactly one place.
"""

from enum import Enum
from functools import lru_cache
from typing import Dict, Iterable, NamedTuple

from .constants import (
    COLLECTION_PREFIX,
    EDM_BOOLEAN,
    EDM_INTEGER_TYPES,
    EDM_NUMBER_TYPES,
    EDM_STRING,
)


class ScalarKind(Enum):
    IDENTIFIER = "identifier"
    DATE_TIME = "date_time"
    DATE_ONLY = "date_only"
    TEXT = "text"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    UNKNOWN = "unknown"


class TypeDescriptor(NamedTuple):
    kind: ScalarKind
    collection_depth: int = 0

    @property
    def is_collection(self) -> bool:
        return self.collection_depth > 0


class MappedType(NamedTuple):
    schema: str  # Runtime validator expression
    annotation: str  # Static type annotation


def unwrap_collection(descriptor: str) -> str:
    """Strip one ``Collection(...)`` wrapper, if present."""
    if descriptor.startswith(COLLECTION_PREFIX):
        descriptor = descriptor[len(COLLECTION_PREFIX):]
        if descriptor.endswith(")"):
            descriptor = descriptor[:-1]
    return descriptor


def is_collection(descriptor: str) -> bool:
    return descriptor.startswith(COLLECTION_PREFIX)


def unqualified_name(type_name: str) -> str:
    """``Microsoft.NAV.customer`` -> ``customer``."""
    return type_name.split('.')[-1]


def navigation_target(descriptor: str) -> str:
    """Unqualified entity name a navigation property points at."""
    return unqualified_name(unwrap_collection(descriptor))


def is_complex_type(descriptor: str, prefixes: Iterable[str]) -> bool:
    """True if the descriptor (or its innermost collection item) lives in a structured-type namespace."""
    inner = descriptor
    while is_collection(inner):
        inner = unwrap_collection(inner)
    return any(prefix and inner.startswith(f"{prefix}.") for prefix in prefixes)


@lru_cache(maxsize=None)
def classify(descriptor: str) -> TypeDescriptor:
    """
    Classify an OData type descriptor. First match wins.

    Guid, DateTime and Date are matched as substrings because the vocabulary
    embeds them in type names (``Edm.DateTimeOffset``, ``Edm.Date``);
    DateTime must be checked before Date. These checks run on the whole
    descriptor, so they take precedence over a ``Collection(...)`` wrapper.
    """
    if "Guid" in descriptor:
        return TypeDescriptor(ScalarKind.IDENTIFIER)
    if "DateTime" in descriptor:
        return TypeDescriptor(ScalarKind.DATE_TIME)
    if "Date" in descriptor:
        return TypeDescriptor(ScalarKind.DATE_ONLY)
    if descriptor == EDM_STRING:
        return TypeDescriptor(ScalarKind.TEXT)
    if descriptor in EDM_INTEGER_TYPES:
        return TypeDescriptor(ScalarKind.INTEGER)
    if descriptor in EDM_NUMBER_TYPES:
        return TypeDescriptor(ScalarKind.NUMBER)
    if descriptor == EDM_BOOLEAN:
        return TypeDescriptor(ScalarKind.BOOLEAN)
    if is_collection(descriptor):
        item = classify(unwrap_collection(descriptor))
        return TypeDescriptor(item.kind, item.collection_depth + 1)
    return TypeDescriptor(ScalarKind.UNKNOWN)


class TypeMapper:
    """Renders classified descriptors for one target backend.

    Args:
        schema_table: Validator expression per scalar kind.
        annotation_table: Type annotation per scalar kind.
        wrap_schema: Format string wrapping an item validator into a collection one.
        wrap_annotation: Format string wrapping an item annotation into a collection one.
    """

    def __init__(self, schema_table: Dict[ScalarKind, str], annotation_table: Dict[ScalarKind, str],
                 wrap_schema: str, wrap_annotation: str):
        missing = [kind.name for kind in ScalarKind if kind not in schema_table or kind not in annotation_table]
        if missing:
            raise ValueError(f"Type mapper tables are missing kinds: {', '.join(missing)}")
        self.schema_table = dict(schema_table)
        self.annotation_table = dict(annotation_table)
        self.wrap_schema = wrap_schema
        self.wrap_annotation = wrap_annotation

    def map(self, descriptor: str) -> MappedType:
        classified = classify(descriptor)
        schema = self.schema_table[classified.kind]
        annotation = self.annotation_table[classified.kind]
        for _ in range(classified.collection_depth):
            schema = self.wrap_schema.format(schema)
            annotation = self.wrap_annotation.format(annotation)
        return MappedType(schema, annotation)

    def schema_for(self, descriptor: str) -> str:
        return self.map(descriptor).schema

    def annotation_for(self, descriptor: str) -> str:
        return self.map(descriptor).annotation


ZOD_SCHEMAS = {
    ScalarKind.IDENTIFIER: "Guid",
    ScalarKind.DATE_TIME: "DateTime",
    ScalarKind.DATE_ONLY: "DateOnly",
    ScalarKind.TEXT: "z.string()",
    ScalarKind.INTEGER: "z.number().int()",
    ScalarKind.NUMBER: "z.number()",
    ScalarKind.BOOLEAN: "z.boolean()",
    ScalarKind.UNKNOWN: "z.unknown()",
}

TYPESCRIPT_ANNOTATIONS = {
    ScalarKind.IDENTIFIER: "string",
    ScalarKind.DATE_TIME: "string",
    ScalarKind.DATE_ONLY: "string",
    ScalarKind.TEXT: "string",
    ScalarKind.INTEGER: "number",
    ScalarKind.NUMBER: "number",
    ScalarKind.BOOLEAN: "boolean",
    ScalarKind.UNKNOWN: "unknown",
}


def zod_type_mapper() -> TypeMapper:
    return TypeMapper(ZOD_SCHEMAS, TYPESCRIPT_ANNOTATIONS, "z.array({})", "{}[]")
