"""Tests for the database resource model."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from redshift_provider.models import DATABASE_SCHEMA, UNLIMITED, DatabaseResource


class TestDatabaseResource:
    def test_defaults(self):
        resource = DatabaseResource(database_name="analytics", owner=104)
        assert resource.id is None
        assert resource.connection_limit == UNLIMITED

    def test_unlimited_is_normalised(self):
        resource = DatabaseResource(database_name="analytics", connection_limit=" unlimited ")
        assert resource.connection_limit == "UNLIMITED"

    def test_numeric_limit_kept_as_text(self):
        resource = DatabaseResource(database_name="analytics", connection_limit="50")
        assert resource.connection_limit == "50"

    def test_limit_may_be_absent(self):
        resource = DatabaseResource(database_name="analytics", connection_limit=None)
        assert resource.connection_limit is None

    def test_no_ceiling_check(self):
        # The engine owns the ceiling
        resource = DatabaseResource(database_name="analytics", connection_limit="100000")
        assert resource.connection_limit == "100000"

    @pytest.mark.parametrize(
        "limit", ["-1", "fifty", "50; DROP DATABASE dev", "", "\u00b2", "\u0665\u0660"]
    )
    def test_rejects_malformed_limit(self, limit: str):
        with pytest.raises(ValidationError):
            DatabaseResource(database_name="analytics", connection_limit=limit)

    def test_rejects_empty_name(self):
        with pytest.raises(ValidationError):
            DatabaseResource(database_name="")

    @pytest.mark.parametrize("database_id", ["abc", "\u00b2", "\u0665\u0660", "\uff11"])
    def test_rejects_non_numeric_id(self, database_id: str):
        with pytest.raises(ValidationError):
            DatabaseResource(id=database_id, database_name="analytics")

    def test_frozen(self):
        resource = DatabaseResource(database_name="analytics")
        with pytest.raises(ValidationError):
            resource.database_name = "changed"


class TestHostState:
    def test_from_state_applies_default_limit(self):
        resource = DatabaseResource.from_state({"database_name": "analytics", "owner": 104})
        assert resource.connection_limit == UNLIMITED
        assert resource.id is None

    def test_from_state_keeps_explicit_null_limit(self):
        resource = DatabaseResource.from_state(
            {"database_name": "analytics", "owner": 104, "connection_limit": None}
        )
        assert resource.connection_limit is None

    def test_from_state_stringifies_id(self):
        resource = DatabaseResource.from_state(
            {"id": 108233, "database_name": "analytics", "owner": 104}
        )
        assert resource.id == "108233"

    def test_from_state_requires_owner(self):
        with pytest.raises(ValueError, match="owner"):
            DatabaseResource.from_state({"database_name": "analytics"})

    def test_to_state_shape(self):
        resource = DatabaseResource(
            id="7", database_name="analytics", owner=104, connection_limit="50"
        )
        assert resource.to_state() == {
            "id": "7",
            "database_name": "analytics",
            "owner": 104,
            "connection_limit": "50",
        }

    def test_schema_marks_required_attributes(self):
        assert DATABASE_SCHEMA["database_name"]["required"] is True
        assert DATABASE_SCHEMA["owner"]["required"] is True
        assert DATABASE_SCHEMA["connection_limit"]["required"] is False
        assert DATABASE_SCHEMA["connection_limit"]["default"] == UNLIMITED
