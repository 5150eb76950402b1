"""Tests for src/rowkeeper/engine/db_row.py."""
from __future__ import annotations

import logging

import pytest

from rowkeeper.diagnostics import Diagnostics
from rowkeeper.engine.db_row import DBRow, Saveable
from rowkeeper.errors import (
    InconsistentState,
    InvalidAdjustment,
    InvalidIdentifier,
    PropertyLocked,
    PropertyNotFound,
    PropertyReadOnly,
)


def _persisted(stock, storage, quantity=10, label="crate"):
    storage.rows[7] = {"id": 7, "qty": str(quantity), "label": label, "created_at": 123}
    assert stock.load(7)
    storage.statements.clear()
    return stock


class TestAccessors:
    def test_defaults_on_construction(self, stock):
        assert stock.get("quantity") == 0
        assert stock.get("label") == ""
        assert stock.is_new()

    def test_set_then_get(self, stock):
        stock.set("quantity", 100)
        assert stock.get("quantity") == 100
        assert stock.tracker.is_changed("quantity")

    @pytest.mark.parametrize("name", ["doesNotExist", "qty", "db_id"])
    def test_unknown_property(self, stock, name):
        with pytest.raises(PropertyNotFound):
            stock.get(name)
        with pytest.raises(PropertyNotFound):
            stock.set(name, 1)
        with pytest.raises(PropertyNotFound):
            stock.adjust(name, 1)

    def test_unknown_property_message_names_class(self, stock):
        with pytest.raises(PropertyNotFound, match="StockRow.nope"):
            stock.get("nope")

    def test_read_only_rejects_set(self, stock):
        with pytest.raises(PropertyReadOnly):
            stock.set("created", 5)
        assert stock.get("created") == 0
        assert not stock.tracker.is_changed("created")

    def test_read_only_rejects_adjust(self, stock):
        with pytest.raises(PropertyReadOnly):
            stock.adjust("created", 5)

    def test_custom_getter_and_setter(self, stock):
        stock.set("nickname", "BIG Crate")
        assert stock._get_stored("nickname") == "big crate"
        assert stock.get("nickname") == "Big Crate"
        assert stock.tracker.is_changed("nickname")

    def test_to_dict_goes_through_getters(self, stock):
        stock.set("nickname", "box")
        assert stock.to_dict() == {
            "quantity": 0, "label": "", "created": 0, "nickname": "Box",
        }

    def test_satisfies_saveable(self, stock):
        assert isinstance(stock, Saveable)

    def test_base_class_is_abstract(self, storage):
        with pytest.raises(TypeError):
            DBRow(storage)


class TestAdjust:
    def test_adjust_is_deferred(self, stock, storage):
        _persisted(stock, storage)
        stock.adjust("quantity", 5)
        stock.adjust("quantity", -2)
        assert stock.tracker.adjusted == {"quantity": 3}
        assert stock.get("quantity") == 10

    def test_set_after_adjust_is_locked(self, stock, storage):
        _persisted(stock, storage)
        stock.adjust("quantity", 5)
        with pytest.raises(PropertyLocked):
            stock.set("quantity", 1)
        stock.save()
        stock.set("quantity", 1)
        assert stock.get("quantity") == 1

    def test_adjust_after_set_folds_into_value(self, stock, storage):
        _persisted(stock, storage)
        stock.set("quantity", 20)
        stock.adjust("quantity", 5)
        assert stock.get("quantity") == 25
        assert not stock.tracker.is_adjusted("quantity")

    def test_adjust_on_new_row_applies_in_memory(self, stock):
        stock.adjust("quantity", 4)
        assert stock.get("quantity") == 4
        assert stock.tracker.is_changed("quantity")
        assert stock.tracker.adjusted == {}

    def test_virtual_property_cannot_be_adjusted(self, stock):
        with pytest.raises(InvalidAdjustment):
            stock.adjust("nickname", 1)

    @pytest.mark.parametrize("delta", ["5", None, True])
    def test_non_numeric_delta(self, stock, storage, delta):
        _persisted(stock, storage)
        with pytest.raises(InvalidAdjustment):
            stock.adjust("quantity", delta)


class TestLoad:
    def test_load_populates_through_conversions(self, stock, storage):
        storage.rows[3] = {"id": 3, "qty": "42", "label": None, "created_at": 99}
        assert stock.load(3) is True
        assert stock.db_id == 3
        assert stock.get("quantity") == 42
        assert stock.get("label") == ""
        # read-only properties are never filled from storage
        assert stock.get("created") == 0
        assert not stock.tracker.is_dirty()

    def test_load_issues_single_select_by_id(self, stock, storage):
        storage.rows[3] = {"id": 3, "qty": 1}
        stock.load(3)
        sql, params = storage.statements[-1]
        assert sql == 'SELECT * FROM "stock" WHERE "id" = ? LIMIT 1'
        assert params == (3,)

    def test_load_locks_unless_skipped(self, make_stock, storage):
        storage.rows[3] = {"id": 3, "qty": 1}
        make_stock().load(3)
        make_stock().load(3, skip_lock=True)
        assert storage.locks == [("stock", 3)]

    def test_skip_lock_is_transient(self, stock, storage):
        storage.rows[3] = {"id": 3, "qty": 1}
        stock.load(3, skip_lock=True)
        assert stock.skip_lock is False

    @pytest.mark.parametrize("bad_id", [0, -5, "abc", None])
    def test_non_positive_id_is_reported(self, stock, storage, diagnostics, bad_id):
        assert stock.load(bad_id) is False
        assert stock.db_id == 0
        assert storage.statements == []
        assert len(diagnostics.messages) == 1

    def test_non_positive_id_raises_in_strict_mode(self, stock, storage):
        strict = type(stock)(storage, Diagnostics(strict=True))
        with pytest.raises(InvalidIdentifier):
            strict.load(0)

    def test_missing_row_keeps_id(self, stock, storage):
        assert stock.load(99) is False
        assert stock.db_id == 99
        assert stock.get("quantity") == 0

    def test_load_discards_pending_changes(self, stock, storage):
        _persisted(stock, storage)
        stock.set("label", "changed")
        stock.load(7)
        assert stock.get("label") == "crate"
        assert not stock.tracker.is_dirty()


class TestSave:
    def test_insert_new_row(self, stock, storage):
        stock.set("quantity", 100)
        stock.set("label", "  crate ")
        stock.save()
        sql, params = storage.last_sql, storage.last_params
        assert sql == 'INSERT INTO "stock" ("qty", "label") VALUES (?, ?)'
        assert params == (100, "crate")
        assert stock.db_id == 1
        assert not stock.tracker.is_dirty()

    def test_insert_of_empty_row_is_reported_but_executed(self, stock, storage, diagnostics):
        stock.save()
        assert storage.last_sql.startswith("INSERT")
        assert stock.db_id == 1
        assert any("empty" in m for m in diagnostics.messages)

    def test_failed_insert_is_reported(self, stock, storage, diagnostics):
        stock.set("quantity", 1)
        storage.fail_next = True
        stock.save()
        assert stock.db_id == 0
        assert any("error saving record" in m for m in diagnostics.messages)

    def test_update_only_changed_fields(self, stock, storage):
        _persisted(stock, storage)
        stock.set("label", "box")
        stock.save()
        assert storage.last_sql == 'UPDATE "stock" SET "label" = ? WHERE "id" = ?'
        assert storage.last_params == ("box", 7)

    def test_update_renders_adjustment_as_delta(self, stock, storage):
        _persisted(stock, storage)
        stock.adjust("quantity", -30)
        stock.save()
        assert storage.last_sql == 'UPDATE "stock" SET "qty" = "qty" + (?) WHERE "id" = ?'
        assert storage.last_params == (-30, 7)
        assert stock.get("quantity") == 10

    def test_update_mixes_literal_and_delta(self, stock, storage):
        _persisted(stock, storage)
        stock.adjust("quantity", 2)
        stock.set("label", "box")
        stock.save()
        assert storage.last_sql == (
            'UPDATE "stock" SET "qty" = "qty" + (?), "label" = ? WHERE "id" = ?'
        )
        assert storage.last_params == (2, "box", 7)

    def test_second_save_issues_nothing(self, stock, storage):
        _persisted(stock, storage)
        stock.set("label", "box")
        stock.save()
        count = len(storage.statements)
        stock.save()
        assert len(storage.statements) == count

    def test_update_without_transaction_is_reported(self, stock, storage, diagnostics):
        _persisted(stock, storage)
        storage.transaction_open = False
        stock.set("label", "box")
        stock.save()
        assert storage.last_sql.startswith("UPDATE")
        assert any("transaction" in m for m in diagnostics.messages)

    def test_update_without_transaction_raises_in_strict_mode(self, stock, storage):
        storage.rows[7] = {"id": 7, "qty": 10}
        strict = type(stock)(storage, Diagnostics(strict=True))
        strict.load(7)
        storage.transaction_open = False
        strict.set("label", "box")
        with pytest.raises(InconsistentState):
            strict.save()

    def test_empty_persisted_row_is_deleted(self, stock, storage):
        _persisted(stock, storage)
        stock.set("quantity", 0)
        stock.save()
        assert storage.last_sql == 'DELETE FROM "stock" WHERE "id" = ?'
        assert storage.last_params == (7,)
        assert stock.is_new()

    def test_deleted_row_can_be_inserted_again(self, stock, storage):
        _persisted(stock, storage)
        stock.set("quantity", 0)
        stock.save()
        stock.set("quantity", 3)
        stock.save()
        assert storage.last_sql.startswith("INSERT")
        assert stock.db_id == 1

    def test_dependents_saved_in_order_after_own_statement(self, stock, storage):
        order = []

        class Dependent:
            def __init__(self, tag):
                self.tag = tag

            def save(self):
                order.append((self.tag, len(storage.statements)))

        stock.add_dependent(Dependent("a"))
        stock.add_dependent(Dependent("b"))
        stock.set("quantity", 1)
        stock.save()
        assert order == [("a", 1), ("b", 1)]

    def test_inconsistency_is_logged(self, stock, caplog):
        with caplog.at_level(logging.ERROR, logger="rowkeeper.diagnostics"):
            stock.save()
        assert "InconsistentState" in caplog.text


class TestFieldSets:
    def test_insert_field_set_skips_read_only_and_virtual(self, stock):
        stock.set("nickname", "x")
        assert stock.make_field_set().as_dict() == {"qty": 0, "label": ""}

    def test_update_field_set_uses_pending_delta(self, stock, storage):
        _persisted(stock, storage)
        stock.adjust("quantity", 6)
        fields = stock.make_field_set(for_update=True)
        assert fields["qty"] == 6
        assert fields.is_delta("qty")
        assert not fields.is_delta("label")

    def test_changed_field_set_is_empty_when_clean(self, stock, storage):
        _persisted(stock, storage)
        assert len(stock.changed_field_set()) == 0
