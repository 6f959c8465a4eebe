"""Field schema type definitions.

Describes one field of a configuration record: its names, the kind of value
it holds, and whether it is exempt from the required-field check.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class FieldKind(Enum):
    """Semantic kinds a configuration field can hold."""

    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    RECORD = "record"
    RECORD_REF = "record_ref"
    OTHER = "other"


@dataclass(frozen=True)
class FieldSchema:
    """
    Definition of a single field in a configuration record.

    Attributes:
        name: Attribute name on the model, used in error reports
        key: Document key the field is decoded from (alias, else name)
        kind: Semantic kind of the declared type
        optional: If True, the field is exempt from the required check
        nullable: If True, the declared type admits None
        record_type: Nested model class for RECORD and RECORD_REF fields
        description: Human-readable description
    """

    name: str
    key: str
    kind: FieldKind
    optional: bool = False
    nullable: bool = False
    record_type: type[Any] | None = None
    description: str = ""

    @property
    def required(self) -> bool:
        return not self.optional

    @property
    def is_nested(self) -> bool:
        """True if the field holds a nested record, by value or by reference."""
        return self.kind in (FieldKind.RECORD, FieldKind.RECORD_REF)
