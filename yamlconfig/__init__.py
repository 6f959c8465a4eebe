"""
Load YAML configuration files into typed records and check required fields.

A record is a pydantic model whose fields all default to their zero value.
Every field is required unless marked optional; after a successful load each
reachable required field holds a non-default value.

Usage:
    from yamlconfig import ConfigRecord, config_field, load_config

    class Database(ConfigRecord):
        host: str = ""
        port: int = 0

    class AppConfig(ConfigRecord):
        name: str = ""
        debug: bool = False
        database: Database | None = config_field(None, omitempty=True)

    cfg = AppConfig()
    load_config("config.yml", cfg)
"""

from __future__ import annotations

from .errors import (
    ConfigError,
    DecodeError,
    InvalidDestinationError,
    MissingFieldError,
    SourceError,
    ValidationError,
)
from .loader import decode_into, load_config, load_config_text
from .schema import (
    OMITEMPTY,
    OPTIONALITY_TAG,
    ConfigRecord,
    config_field,
    describe_record,
    get_required_fields,
    is_config_record,
    iter_fields,
)
from .types import FieldKind, FieldSchema
from .validator import is_empty, is_present, validate

__all__ = [
    # Entry points
    "load_config",
    "load_config_text",
    "decode_into",
    "validate",
    # Error classes
    "ConfigError",
    "SourceError",
    "DecodeError",
    "ValidationError",
    "MissingFieldError",
    "InvalidDestinationError",
    # Schema
    "ConfigRecord",
    "config_field",
    "OPTIONALITY_TAG",
    "OMITEMPTY",
    "FieldKind",
    "FieldSchema",
    "describe_record",
    "get_required_fields",
    "is_config_record",
    "iter_fields",
    "is_empty",
    "is_present",
]
