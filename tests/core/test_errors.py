"""
Tests for orderstore.core.errors.

Covers:
- Category and retryable defaults per subclass
- with_context fluent API and metadata overflow
- to_dict serialization, including ValidationError extras
"""

import pytest

from orderstore.core.errors import (
    ConfigError,
    DatabaseError,
    ErrorCategory,
    InvalidEntityError,
    OrderStoreError,
    RecordInsertError,
    ValidationError,
)


class TestDefaults:
    @pytest.mark.parametrize(
        ("cls", "category"),
        [
            (OrderStoreError, ErrorCategory.INTERNAL),
            (InvalidEntityError, ErrorCategory.NOT_FOUND),
            (DatabaseError, ErrorCategory.DATABASE),
            (RecordInsertError, ErrorCategory.DATABASE),
            (ValidationError, ErrorCategory.VALIDATION),
            (ConfigError, ErrorCategory.CONFIG),
        ],
    )
    def test_category(self, cls, category):
        assert cls("boom").category is category

    @pytest.mark.parametrize("cls", [RecordInsertError, InvalidEntityError, ConfigError])
    def test_nothing_is_retryable(self, cls):
        assert cls("x").retryable is False

    def test_insert_error_is_database_error(self):
        assert isinstance(RecordInsertError("x"), DatabaseError)


class TestContext:
    def test_known_fields_set(self):
        err = InvalidEntityError("Invalid order.").with_context(operation="read", record_id=7)
        assert err.context.operation == "read"
        assert err.context.record_id == 7

    def test_unknown_fields_go_to_metadata(self):
        err = OrderStoreError("x").with_context(shard="a")
        assert err.context.metadata == {"shard": "a"}

    def test_with_context_returns_self(self):
        err = OrderStoreError("x")
        assert err.with_context(operation="create") is err


class TestToDict:
    def test_basic(self):
        d = InvalidEntityError("Invalid order.").with_context(record_id=3).to_dict()
        assert d["error_type"] == "InvalidEntityError"
        assert d["message"] == "Invalid order."
        assert d["category"] == "NOT_FOUND"
        assert d["retryable"] is False
        assert d["context"]["record_id"] == 3

    def test_cause_is_chained(self):
        cause = ValueError("disk full")
        err = RecordInsertError("insert failed", cause=cause)
        assert err.__cause__ is cause
        assert err.to_dict()["cause"] == "disk full"

    def test_validation_extras(self):
        d = ValidationError("bad", field="total", value="abc").to_dict()
        assert d["field"] == "total"
        assert d["value"] == "'abc'"
