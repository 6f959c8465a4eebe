"""
Recursive required-field validation for decoded configuration records.

Walks a record depth-first, in field declaration order, and raises on the
first required field that still holds its type's default value.

Nested records are only descended into when present:
- a reference (``Model | None``) is present when it is not None, and its
  children are then validated even if the field itself is optional
- a record held by value is present when it is not empty all the way down;
  by-value records cannot tell an omitted section from one whose values are
  all defaults, so an all-default optional section is never descended into
"""

from __future__ import annotations

import logging
from collections.abc import Sized
from numbers import Number
from typing import Any

from pydantic import BaseModel

from .errors import InvalidDestinationError, MissingFieldError
from .logging_config import TRACE
from .schema import is_config_record, iter_fields
from .types import FieldKind

logger = logging.getLogger(__name__)


def validate(root: Any) -> None:
    """
    Validate that every reachable required field of a record is populated.

    Args:
        root: A decoded configuration record (pydantic model instance)

    Raises:
        InvalidDestinationError: If root is not a record instance
        MissingFieldError: For the first required field found empty
    """
    if not is_config_record(root):
        raise InvalidDestinationError(
            f"expected a pydantic model instance, got {type(root).__name__}; "
            "please ensure the input is a config record instance"
        )

    checked = _validate_record(root, prefix="")
    logger.debug(f"Validated {checked} fields of {type(root).__name__}")


def _validate_record(record: BaseModel, prefix: str) -> int:
    """Validate one record and its present sections, returning the field count."""
    checked = 0
    for field, value in iter_fields(record):
        path = f"{prefix}.{field.key}" if prefix else field.key
        checked += 1
        logger.log(TRACE, f"Checking {path} ({field.kind.value}, {'optional' if field.optional else 'required'})")

        if field.required and is_empty(value, field.kind):
            raise MissingFieldError(field.name, path=path)

        if not (field.is_nested or is_config_record(value)):
            continue

        if is_config_record(value) and is_present(value, field.kind):
            checked += _validate_record(value, path)
        else:
            logger.debug(f"Skipping absent config section '{path}'")

    return checked


def is_present(value: Any, kind: FieldKind | None = None) -> bool:
    """
    Check whether a nested record section was supplied.

    A reference is present when not None, whatever its contents. A record
    held by value is present when it is not empty.
    """
    if value is None:
        return False
    if kind is FieldKind.RECORD_REF:
        return True
    return not is_empty(value, kind)


def is_empty(value: Any, kind: FieldKind | None = None) -> bool:
    """
    Check if a value equals its type's default.

    Booleans are never empty: False is a legitimate explicit value.

    Args:
        value: The value to check
        kind: Declared kind of the field holding the value, if known

    Returns:
        True if the value counts as missing
    """
    if value is None:
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, BaseModel):
        if kind is FieldKind.RECORD_REF:
            return False
        return all(is_empty(child, field.kind) for field, child in iter_fields(value))
    if isinstance(value, (str, bytes)):
        return len(value) == 0
    if isinstance(value, Number):
        return value == 0
    if isinstance(value, Sized):
        return len(value) == 0
    return False
