"""Tests for the recursive required-field validator.

Covers:
1. Emptiness per value type (booleans never empty, records empty all the way down)
2. First-violation reporting in declaration order
3. Optional sections held by value vs. by reference
4. Usage errors for non-record roots
"""

from __future__ import annotations

import logging

import pytest
from pydantic import BaseModel, Field

from yamlconfig.errors import InvalidDestinationError, MissingFieldError, ValidationError
from yamlconfig.schema import ConfigRecord, config_field
from yamlconfig.types import FieldKind
from yamlconfig.validator import is_empty, is_present, validate


class Server(ConfigRecord):
    host: str = ""
    port: int = 0


class Flags(ConfigRecord):
    verbose: bool = False


class Credentials(ConfigRecord):
    user: str = ""
    password: str = ""


class Database(ConfigRecord):
    url: str = ""
    pool_size: int = 0
    credentials: Credentials = Field(default_factory=Credentials)


class AppConfig(ConfigRecord):
    name: str = ""
    workers: int = 0
    ratio: float = 0.0
    debug: bool = False
    tags: list[str] = Field(default_factory=list)
    labels: dict[str, str] = Field(default_factory=dict)
    server: Server = Field(default_factory=Server)
    notes: str = config_field("", omitempty=True)
    cache: Server = config_field(default_factory=Server, omitempty=True)
    database: Database | None = config_field(None, omitempty=True)


def complete_config(**overrides) -> AppConfig:
    values = {
        "name": "svc",
        "workers": 4,
        "ratio": 0.5,
        "tags": ["a"],
        "labels": {"team": "core"},
        "server": Server(host="localhost", port=8080),
    }
    values.update(overrides)
    return AppConfig(**values)


class TestIsEmpty:
    """Test the per-type emptiness rule."""

    def test_strings(self):
        assert is_empty("") is True
        assert is_empty("x") is False
        assert is_empty(b"") is True

    def test_numbers(self):
        assert is_empty(0) is True
        assert is_empty(0.0) is True
        assert is_empty(1) is False
        assert is_empty(-1) is False
        assert is_empty(0.25) is False

    def test_containers(self):
        assert is_empty([]) is True
        assert is_empty({}) is True
        assert is_empty(()) is True
        assert is_empty(set()) is True
        # Contents are not inspected, only the element count
        assert is_empty([0]) is False
        assert is_empty({"k": ""}) is False

    def test_booleans_are_never_empty(self):
        assert is_empty(False) is False
        assert is_empty(True) is False

    def test_none_is_empty(self):
        assert is_empty(None) is True
        assert is_empty(None, FieldKind.RECORD_REF) is True

    def test_record_by_value_empty_all_the_way_down(self):
        assert is_empty(Server()) is True
        assert is_empty(Server(port=1)) is False
        assert is_empty(Database()) is True
        assert is_empty(Database(credentials=Credentials(user="u"))) is False

    def test_record_with_bool_field_is_never_empty(self):
        """A bool leaf is never empty, so neither is its record."""
        assert is_empty(Flags()) is False

    def test_reference_is_never_empty_when_set(self):
        assert is_empty(Server(), FieldKind.RECORD_REF) is False

    def test_unknown_objects_are_not_empty(self):
        assert is_empty(object()) is False


class TestIsPresent:
    """Test presence detection for nested sections."""

    def test_reference_presence(self):
        assert is_present(None, FieldKind.RECORD_REF) is False
        assert is_present(Server(), FieldKind.RECORD_REF) is True

    def test_by_value_presence(self):
        assert is_present(Server(), FieldKind.RECORD) is False
        assert is_present(Server(host="h"), FieldKind.RECORD) is True


class TestValidate:
    """Test the traversal and first-violation reporting."""

    def test_complete_config_passes(self):
        validate(complete_config())

    def test_missing_string_reported_by_name(self):
        with pytest.raises(MissingFieldError, match="missing required config item: name") as exc_info:
            validate(complete_config(name=""))

        assert exc_info.value.field == "name"
        assert exc_info.value.path == "name"
        assert isinstance(exc_info.value, ValidationError)

    @pytest.mark.parametrize(
        "field, empty_value",
        [
            ("workers", 0),
            ("ratio", 0.0),
            ("tags", []),
            ("labels", {}),
        ],
    )
    def test_each_empty_leaf_kind_fails(self, field, empty_value):
        with pytest.raises(MissingFieldError) as exc_info:
            validate(complete_config(**{field: empty_value}))

        assert exc_info.value.field == field

    def test_first_violation_in_declaration_order(self):
        with pytest.raises(MissingFieldError) as exc_info:
            validate(complete_config(workers=0, name=""))

        assert exc_info.value.field == "name"

    def test_false_bool_without_marker_passes(self):
        config = complete_config(debug=False)

        validate(config)

        assert config.debug is False

    def test_optional_leaf_may_be_empty(self):
        validate(complete_config(notes=""))

    def test_record_without_required_fields_passes_vacuously(self):
        class Empty(ConfigRecord):
            pass

        class OnlyOptional(ConfigRecord):
            value: str = config_field("", omitempty=True)

        validate(Empty())
        validate(OnlyOptional())

    def test_required_by_value_section_fully_empty_reports_section(self):
        with pytest.raises(MissingFieldError) as exc_info:
            validate(complete_config(server=Server()))

        assert exc_info.value.field == "server"

    def test_required_by_value_section_partially_filled_reports_child(self):
        with pytest.raises(MissingFieldError) as exc_info:
            validate(complete_config(server=Server(host="localhost")))

        assert exc_info.value.field == "port"
        assert exc_info.value.path == "server.port"

    def test_optional_by_value_section_absent_skips_children(self):
        config = complete_config()

        validate(config)

        assert config.cache == Server()

    def test_optional_by_value_section_partially_filled_validates_children(self):
        with pytest.raises(MissingFieldError) as exc_info:
            validate(complete_config(cache=Server(port=6379)))

        assert exc_info.value.path == "cache.host"

    def test_optional_reference_absent_passes(self):
        config = complete_config(database=None)

        validate(config)

        assert config.database is None

    def test_optional_reference_present_with_missing_child_fails(self):
        with pytest.raises(MissingFieldError) as exc_info:
            validate(complete_config(database=Database(url="postgres://db")))

        assert exc_info.value.field == "pool_size"
        assert exc_info.value.path == "database.pool_size"

    def test_optional_reference_present_but_all_default_validates_children(self):
        with pytest.raises(MissingFieldError) as exc_info:
            validate(complete_config(database=Database()))

        assert exc_info.value.field == "url"

    def test_optional_reference_complete_passes(self):
        database = Database(url="postgres://db", pool_size=5, credentials=Credentials(user="u", password="p"))

        validate(complete_config(database=database))

    def test_deeply_nested_violation_path(self):
        database = Database(url="postgres://db", pool_size=5, credentials=Credentials(user="u"))

        with pytest.raises(MissingFieldError) as exc_info:
            validate(complete_config(database=database))

        assert exc_info.value.field == "password"
        assert exc_info.value.path == "database.credentials.password"

    def test_required_reference_none_fails(self):
        class WithRequiredRef(ConfigRecord):
            server: Server | None = None

        with pytest.raises(MissingFieldError) as exc_info:
            validate(WithRequiredRef())

        assert exc_info.value.field == "server"

    def test_required_reference_present_validates_children(self):
        class WithRequiredRef(ConfigRecord):
            server: Server | None = None

        with pytest.raises(MissingFieldError) as exc_info:
            validate(WithRequiredRef(server=Server()))

        assert exc_info.value.field == "host"

    def test_path_uses_document_keys(self):
        class Aliased(ConfigRecord):
            server: Server = config_field(default_factory=Server, key="http_server")

        with pytest.raises(MissingFieldError) as exc_info:
            validate(Aliased(server=Server(host="h")))

        assert exc_info.value.field == "port"
        assert exc_info.value.path == "http_server.port"

    def test_lists_of_records_are_leaves(self):
        class Cluster(ConfigRecord):
            nodes: list[Server] = Field(default_factory=list)

        validate(Cluster(nodes=[Server()]))

    def test_plain_base_model_is_accepted(self):
        class Plain(BaseModel):
            name: str = ""

        with pytest.raises(MissingFieldError):
            validate(Plain())
        validate(Plain(name="x"))

    def test_validation_does_not_mutate(self):
        config = complete_config(database=Database(url="postgres://db"))
        before = config.model_dump()

        with pytest.raises(MissingFieldError):
            validate(config)

        assert config.model_dump() == before

    def test_skipped_sections_logged_at_debug(self, caplog):
        caplog.set_level(logging.DEBUG, logger="yamlconfig.validator")

        validate(complete_config())

        assert "Skipping absent config section 'cache'" in caplog.text
        assert "Skipping absent config section 'database'" in caplog.text


class TestValidateUsageErrors:
    """Roots that are not record instances are rejected before traversal."""

    @pytest.mark.parametrize("root", [{"name": "x"}, "name: x", 42, None, AppConfig])
    def test_non_record_root_rejected(self, root):
        with pytest.raises(InvalidDestinationError, match="expected a pydantic model instance"):
            validate(root)

    def test_usage_error_is_a_type_error(self):
        with pytest.raises(TypeError):
            validate([])
