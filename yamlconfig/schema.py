"""Configuration record introspection.

Turns a pydantic model class into an ordered list of FieldSchema nodes.
The validator only ever sees records through this module, so any model class
works as a configuration schema without implementing anything itself.

A field is required unless it carries the optionality marker:

    class Database(ConfigRecord):
        host: str = ""
        port: int = 0

    class Config(ConfigRecord):
        name: str = config_field("", key="app_name")
        debug: bool = False
        tags: list[str] = config_field(default_factory=list, omitempty=True)
        database: Database | None = config_field(None, omitempty=True)
"""

from __future__ import annotations

import types
from collections.abc import Iterator, Mapping, Sequence, Set
from functools import lru_cache
from typing import Annotated, Any, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, Field
from pydantic.fields import FieldInfo

from .errors import InvalidDestinationError
from .types import FieldKind, FieldSchema

# Marker stored in a field's json_schema_extra. Exactly one value is recognised.
OPTIONALITY_TAG = "yamlconfig"
OMITEMPTY = "omitempty"


class ConfigRecord(BaseModel):
    """Convenience base for configuration records.

    Fields may be populated by attribute name as well as by document key,
    and unknown document keys are ignored. Unquoted numbers decode into
    string fields as their text (``version: 1.2`` gives ``"1.2"``).
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", coerce_numbers_to_str=True)


def config_field(
    default: Any = ...,
    *,
    key: str | None = None,
    omitempty: bool = False,
    default_factory: Any = None,
    description: str | None = None,
) -> Any:
    """
    Declare a configuration field.

    Args:
        default: Zero value of the field
        key: Document key, when it differs from the attribute name
        omitempty: Exempt the field from the required check
        default_factory: Callable producing the zero value (lists, dicts, records)
        description: Human-readable description

    Returns:
        A pydantic FieldInfo
    """
    extra = {OPTIONALITY_TAG: OMITEMPTY} if omitempty else None
    if default_factory is not None:
        return Field(default_factory=default_factory, alias=key, description=description, json_schema_extra=extra)
    return Field(default, alias=key, description=description, json_schema_extra=extra)


def is_config_record(obj: Any) -> bool:
    """Return True if obj is a record instance the validator can walk."""
    return isinstance(obj, BaseModel)


def is_omitempty(info: FieldInfo) -> bool:
    extra = info.json_schema_extra
    return isinstance(extra, dict) and extra.get(OPTIONALITY_TAG) == OMITEMPTY


def classify(annotation: Any) -> tuple[FieldKind, type[BaseModel] | None]:
    """
    Map a declared type to its FieldKind.

    A nested model becomes RECORD, or RECORD_REF when the annotation also
    admits None (``Model | None``).

    Args:
        annotation: The field's type annotation

    Returns:
        Tuple of (kind, nested model class or None)
    """
    origin = get_origin(annotation)

    if origin is Annotated:
        return classify(get_args(annotation)[0])

    if origin is Union or origin is types.UnionType:
        args = get_args(annotation)
        members = [arg for arg in args if arg is not type(None)]
        if len(members) != 1:
            return FieldKind.OTHER, None
        kind, record_type = classify(members[0])
        if kind is FieldKind.RECORD and len(members) < len(args):
            return FieldKind.RECORD_REF, record_type
        return kind, record_type

    target = origin if origin is not None else annotation
    if not isinstance(target, type):
        return FieldKind.OTHER, None

    if issubclass(target, BaseModel):
        return FieldKind.RECORD, target
    # bool is an int subclass
    if issubclass(target, bool):
        return FieldKind.BOOL, None
    if issubclass(target, (str, bytes)):
        return FieldKind.STRING, None
    if issubclass(target, int):
        return FieldKind.INT, None
    if issubclass(target, float):
        return FieldKind.FLOAT, None
    if issubclass(target, Mapping):
        return FieldKind.MAPPING, None
    if issubclass(target, (Sequence, Set)):
        return FieldKind.SEQUENCE, None
    return FieldKind.OTHER, None


def accepts_none(annotation: Any) -> bool:
    """Return True if None is a valid value for the declared type."""
    if annotation is Any or annotation is None or annotation is type(None):
        return True
    origin = get_origin(annotation)
    if origin is Annotated:
        return accepts_none(get_args(annotation)[0])
    if origin is Union or origin is types.UnionType:
        return any(accepts_none(arg) for arg in get_args(annotation))
    return False


def describe_record(model_cls: type[BaseModel]) -> tuple[FieldSchema, ...]:
    """
    Get the field schema of a record class, in declaration order.

    Args:
        model_cls: A pydantic model class

    Returns:
        Tuple of FieldSchema nodes

    Raises:
        InvalidDestinationError: If model_cls is not a pydantic model class
    """
    if not (isinstance(model_cls, type) and issubclass(model_cls, BaseModel)):
        raise InvalidDestinationError(f"expected a pydantic model class, got {model_cls!r}")
    return _describe_record(model_cls)


@lru_cache(maxsize=256)
def _describe_record(model_cls: type[BaseModel]) -> tuple[FieldSchema, ...]:
    fields = []
    for name, info in model_cls.model_fields.items():
        kind, record_type = classify(info.annotation)
        fields.append(
            FieldSchema(
                name=name,
                key=info.alias or name,
                kind=kind,
                optional=is_omitempty(info),
                nullable=accepts_none(info.annotation),
                record_type=record_type,
                description=info.description or "",
            )
        )
    return tuple(fields)


def iter_fields(record: BaseModel) -> Iterator[tuple[FieldSchema, Any]]:
    """Yield (schema, current value) for every field of a record instance."""
    for field in describe_record(type(record)):
        yield field, getattr(record, field.name)


def get_required_fields(model_cls: type[BaseModel]) -> list[str]:
    """
    Get the required top-level fields of a record class.

    Returns:
        List of attribute names without the optionality marker
    """
    return [field.name for field in describe_record(model_cls) if field.required]
