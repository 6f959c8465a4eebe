"""
Check a YAML configuration file against a config record class.

Usage:
    yamlconfig config.yml --model myapp.config:AppConfig

Exit codes: 0 valid, 1 load failed, 2 bad --model reference.
"""

from __future__ import annotations

import argparse
import importlib
import sys

from pydantic import BaseModel

from .errors import ConfigError
from .loader import load_config
from .logging_config import configure_logging, get_logger

logger = get_logger(__name__)


def import_model(reference: str) -> type[BaseModel]:
    """
    Resolve a "module:ClassName" reference to a record class.

    Raises:
        ImportError: If the module cannot be imported
        AttributeError: If the class is not found in the module
        ValueError: If the reference is malformed or not a pydantic model
    """
    module_name, sep, attr_path = reference.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError("expected module:ClassName")

    target: object = importlib.import_module(module_name)
    for part in attr_path.split("."):
        target = getattr(target, part)

    if not (isinstance(target, type) and issubclass(target, BaseModel)):
        raise ValueError(f"{reference} is not a pydantic model class")
    return target


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="yamlconfig",
        description="Check a YAML configuration file against a config record class",
    )
    parser.add_argument("path", help="Path to the YAML configuration file")
    parser.add_argument("--model", required=True, help="Record class as module:ClassName")
    parser.add_argument("--encoding", default=None, help="File encoding (default: YAMLCONFIG_ENCODING or utf-8)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    configure_logging(source="yamlconfig", debug=args.debug)

    try:
        destination = import_model(args.model)()
    except (ImportError, AttributeError, ValueError) as e:  # pydantic errors are ValueErrors
        print(f"Invalid --model {args.model!r}: {e}", file=sys.stderr)
        return 2

    try:
        load_config(args.path, destination, encoding=args.encoding)
    except ConfigError as e:
        logger.debug(f"Config check failed for {args.path}", exc_info=True)
        print(str(e), file=sys.stderr)
        return 1

    print(f"OK: {args.path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
