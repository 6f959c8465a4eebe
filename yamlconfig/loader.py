"""
Load a YAML configuration file into a caller-provided record.

Fast-fail: the first problem in any stage is raised, and later stages never run.

1. Source: the file is opened and read (SourceError)
2. Decode: the YAML document is decoded into the record in place (DecodeError)
3. Validate: every reachable required field must be populated (ValidationError)
"""

from __future__ import annotations

import logging
import os
from typing import Any

import yaml
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .errors import DecodeError, InvalidDestinationError, SourceError, ValidationError
from .schema import describe_record, is_config_record
from .settings import get_settings
from .validator import validate

logger = logging.getLogger(__name__)

_NO_DOCUMENT = object()


def load_config(
    path: str | os.PathLike[str],
    destination: Any,
    *,
    encoding: str | None = None,
) -> None:
    """
    Load a YAML configuration file into destination and validate it.

    Args:
        path: Path to the configuration file
        destination: Zero-valued record instance, populated in place
        encoding: File encoding (defaults to the YAMLCONFIG_ENCODING setting)

    Raises:
        SourceError: If the file cannot be opened or read
        DecodeError: If the document is malformed, does not fit the record,
            or destination is not a record instance
        ValidationError: If a required field is missing

    Example:
        cfg = AppConfig()
        load_config("config.yml", cfg)
    """
    text = _read_source(path, encoding or get_settings().encoding)
    decode_into(text, destination, source=path)
    _validate_loaded(destination)
    logger.info(f"Loaded config {os.fspath(path)} into {type(destination).__name__}")


def load_config_text(text: str, destination: Any) -> None:
    """
    Decode a YAML string into destination and validate it.

    Same as load_config without the file: raises DecodeError or ValidationError.
    """
    decode_into(text, destination)
    _validate_loaded(destination)


def _read_source(path: str | os.PathLike[str], encoding: str) -> str:
    """Read the whole source; the file is closed on every exit path."""
    try:
        with open(path, encoding=encoding) as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise DecodeError(f"failed to decode config file: {e}", path=path) from e
    except (OSError, LookupError) as e:
        raise SourceError(f"failed to load config file: {e}", path=path) from e


def decode_into(text: str, destination: Any, *, source: str | os.PathLike[str] = "<string>") -> None:
    """
    Decode the first YAML document in text into destination, in place.

    Values already set on destination are kept unless the document sets them.
    Mappings are merged key by key; every other value is replaced. Unknown
    keys are ignored, and a null document leaves destination unchanged. A
    null value only clears a field whose type admits None; any other field
    keeps its current value.

    Args:
        text: YAML source text
        destination: Record instance to populate
        source: Name of the source, for error reports

    Raises:
        DecodeError: If decoding fails for any reason
    """
    try:
        _check_destination(destination)
    except InvalidDestinationError as e:
        raise DecodeError(f"failed to decode config file: {e}", path=source) from e

    try:
        document = next(yaml.safe_load_all(text), _NO_DOCUMENT)
    except yaml.YAMLError as e:
        raise DecodeError(f"failed to decode config file: {e}", path=source) from e

    if document is _NO_DOCUMENT:
        raise DecodeError("failed to decode config file: EOF (no YAML document found)", path=source)
    if document is None:
        logger.debug(f"Config source {os.fspath(source)} holds a null document, nothing decoded")
        return
    if not isinstance(document, dict):
        raise DecodeError(
            f"failed to decode config file: cannot decode {type(document).__name__} "
            f"into {type(destination).__name__}",
            path=source,
        )

    model_cls = type(destination)
    document = _drop_nulls(document, model_cls)
    merged = _deep_merge(destination.model_dump(by_alias=True), document)
    try:
        decoded = model_cls.model_validate(merged)
    except PydanticValidationError as e:
        raise DecodeError(f"failed to decode config file: {e}", path=source) from e

    for name in model_cls.model_fields:
        setattr(destination, name, getattr(decoded, name))

    logger.debug(f"Decoded {len(document)} top-level keys from {os.fspath(source)}")


def _check_destination(destination: Any) -> None:
    if not is_config_record(destination):
        raise InvalidDestinationError(
            f"expected a pydantic model instance, got {type(destination).__name__}; "
            "please ensure the destination is a config record instance"
        )
    if destination.model_config.get("frozen"):
        raise InvalidDestinationError(f"{type(destination).__name__} is frozen and cannot be populated in place")


def _validate_loaded(destination: BaseModel) -> None:
    try:
        validate(destination)
    except ValidationError as e:
        raise ValidationError(f"failed to load the config: {e}", field=e.field, path=e.path) from e


def _drop_nulls(document: dict[Any, Any], model_cls: type[BaseModel]) -> dict[Any, Any]:
    """
    Remove null values the record cannot hold, recursing into nested sections.

    ``note:`` or ``db: ~`` leaves a str, int or by-value record field at its
    current value, so a blank required key fails validation by name instead
    of failing to decode. Fields typed ``Model | None`` keep the None.
    """
    fields = {}
    for field in describe_record(model_cls):
        fields[field.name] = field
        fields[field.key] = field

    result: dict[Any, Any] = {}
    for key, value in document.items():
        field = fields.get(key)
        if field is None:
            result[key] = value
        elif value is None:
            if field.nullable:
                result[key] = value
        elif isinstance(value, dict) and field.record_type is not None:
            result[key] = _drop_nulls(value, field.record_type)
        else:
            result[key] = value
    return result


def _deep_merge(base: dict[str, Any], override: dict[Any, Any]) -> dict[Any, Any]:
    """
    Deep merge two dicts, with override taking precedence.

    Merging the document over the destination's current dump is what keeps
    values the document omits when decoding in place.
    """
    result: dict[Any, Any] = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result
