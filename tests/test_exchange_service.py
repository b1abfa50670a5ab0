# tests/test_exchange_service.py
"""
Exchange Service Tests - Upsert, History and Filtered Listing

Unit tests run the service against a Mock store to pin down the call
sequence; integration tests run it against a migrated SQLite store.

Files that this module USES:
- xregister.application.exchange_service (ExchangeRateService)
- xregister.adapters.persistence (SQLiteExchangeStore, migrate)
- unittest.mock (Mock store)
- pytest (testing framework)
"""
from datetime import datetime, timezone
from unittest.mock import MagicMock, Mock, patch

import pytest

from xregister.adapters.persistence import SQLiteExchangeStore, migrate
from xregister.application.exchange_service import ExchangeRateService
from xregister.domain.errors import StoreError

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
T1 = datetime(2024, 1, 1, 12, 1, tzinfo=timezone.utc)


def _row(id=1, base="USD", target="BRL", rate=5.25, created_at=T0, updated_at=None):
    return {
        "id": id,
        "base_currency": base,
        "target_currency": target,
        "rate": rate,
        "created_at": created_at,
        "updated_at": updated_at,
    }


def _history_count(store, exchange_id=None):
    if exchange_id is None:
        row = store.query_one("SELECT COUNT(*) AS cnt FROM exchange_rate_history")
    else:
        row = store.query_one(
            "SELECT COUNT(*) AS cnt FROM exchange_rate_history WHERE exchange_id = ?",
            (exchange_id,),
        )
    return row["cnt"]


class FailingHistoryStore(SQLiteExchangeStore):
    """SQLite store whose history inserts always fail."""

    def execute(self, sql, params=None):
        if sql.startswith("INSERT INTO exchange_rate_history"):
            raise StoreError("history insert failed")
        return super().execute(sql, params)


class TestReceiveExchangeRateWithMockStore:
    def test_create_new_exchange(self):
        store = Mock()
        store.query_one.side_effect = [None, {"id": 7}]
        service = ExchangeRateService(store, clock=lambda: T0)

        service.receive_exchange_rate("USD", "BRL", 5.25)

        assert store.query_one.call_count == 2
        insert_sql, insert_params = store.query_one.call_args_list[1].args
        assert insert_sql.startswith("INSERT INTO exchanges")
        assert "RETURNING id" in insert_sql
        assert insert_params == ("USD", "BRL", 5.25, T0)
        store.execute.assert_called_once_with(
            "INSERT INTO exchange_rate_history (exchange_id, rate) VALUES (?, ?)",
            (7, 5.25),
        )

    def test_update_existing_exchange(self):
        store = Mock()
        store.query_one.return_value = _row(id=3)
        service = ExchangeRateService(store, clock=lambda: T1)

        service.receive_exchange_rate("USD", "BRL", 5.5)

        assert store.query_one.call_count == 1
        update_call, history_call = store.execute.call_args_list
        assert update_call.args == (
            "UPDATE exchanges SET rate = ?, updated_at = ? WHERE id = ?",
            (5.5, T1, 3),
        )
        assert history_call.args[1] == (3, 5.5)

    def test_lookup_error_propagates_without_writes(self):
        store = Mock()
        store.query_one.side_effect = StoreError("connection lost")
        service = ExchangeRateService(store)

        with pytest.raises(StoreError, match="connection lost"):
            service.receive_exchange_rate("USD", "BRL", 5.25)
        store.execute.assert_not_called()

    def test_create_error_propagates(self):
        store = Mock()
        store.query_one.side_effect = [None, StoreError("duplicate key")]
        service = ExchangeRateService(store)

        with pytest.raises(StoreError, match="duplicate key"):
            service.receive_exchange_rate("USD", "BRL", 5.25)
        store.execute.assert_not_called()

    def test_update_error_propagates_before_history(self):
        store = Mock()
        store.query_one.return_value = _row()
        store.execute.side_effect = StoreError("update failed")
        service = ExchangeRateService(store)

        with pytest.raises(StoreError, match="update failed"):
            service.receive_exchange_rate("USD", "BRL", 5.5)
        assert store.execute.call_count == 1

    def test_transactional_wraps_calls_in_transaction(self):
        store = MagicMock()
        store.query_one.return_value = _row()
        service = ExchangeRateService(store, transactional=True)

        service.receive_exchange_rate("USD", "BRL", 5.5)

        store.transaction.assert_called_once()
        store.transaction.return_value.__enter__.assert_called_once()
        store.transaction.return_value.__exit__.assert_called_once()

    def test_non_transactional_never_opens_transaction(self):
        store = Mock()
        store.query_one.return_value = _row()
        service = ExchangeRateService(store)

        service.receive_exchange_rate("USD", "BRL", 5.5)

        store.transaction.assert_not_called()


class TestListExchangesWithMockStore:
    @pytest.mark.parametrize(
        "base, target, expected_where, expected_params",
        [
            ("", "", "", []),
            ("USD", "", " WHERE base_currency = ?", ["USD"]),
            ("", "BRL", " WHERE target_currency = ?", ["BRL"]),
            ("USD", "BRL", " WHERE base_currency = ? AND target_currency = ?", ["USD", "BRL"]),
        ],
    )
    def test_filter_predicates(self, base, target, expected_where, expected_params):
        store = Mock()
        store.query.return_value = []
        service = ExchangeRateService(store)

        service.list_exchanges(base, target)

        sql, params = store.query.call_args.args
        assert sql.endswith(expected_where + " ORDER BY id")
        assert params == expected_params

    def test_rows_become_exchanges(self):
        store = Mock()
        store.query.return_value = [
            _row(id=1, base="USD", rate=5.25),
            _row(id=2, base="EUR", rate=5.75, updated_at="2024-01-02 08:00:00"),
        ]
        service = ExchangeRateService(store)

        result = service.list_exchanges()

        assert [e.base_currency for e in result] == ["USD", "EUR"]
        assert result[0].updated_at is None
        assert result[1].updated_at == datetime(2024, 1, 2, 8, 0, tzinfo=timezone.utc)

    def test_empty_result_is_empty_list(self):
        store = Mock()
        store.query.return_value = []
        assert ExchangeRateService(store).list_exchanges("XXX", "") == []

    def test_storage_error_propagates(self):
        store = Mock()
        store.query.side_effect = StoreError("timeout")
        with pytest.raises(StoreError):
            ExchangeRateService(store).list_exchanges()


class TestExchangeServiceIntegration:
    def test_first_sync_creates_exchange_and_history(self, exchange_service, store):
        exchange_service.receive_exchange_rate("USD", "BRL", 5.25)

        exchanges = exchange_service.list_exchanges("USD", "BRL")
        assert len(exchanges) == 1
        exchange = exchanges[0]
        assert exchange.id > 0
        assert exchange.rate == pytest.approx(5.25)
        assert exchange.created_at == T0
        assert exchange.updated_at is None
        assert _history_count(store, exchange.id) == 1

    def test_create_then_update_keeps_full_history(self, exchange_service, store):
        exchange_service.receive_exchange_rate("USD", "BRL", 5.25)
        exchange_service.receive_exchange_rate("USD", "BRL", 5.50)

        exchanges = exchange_service.list_exchanges("USD", "BRL")
        assert len(exchanges) == 1
        exchange = exchanges[0]
        assert exchange.rate == pytest.approx(5.50)
        assert exchange.created_at == T0
        assert exchange.updated_at == T1

        history = exchange_service.list_history(exchange.id)
        assert [h.rate for h in history] == pytest.approx([5.25, 5.50])
        assert all(h.exchange_id == exchange.id for h in history)
        assert all(h.created_at.tzinfo is not None for h in history)

    def test_history_length_matches_sync_count(self, exchange_service, store):
        rates = [5.1, 5.2, 5.3, 5.4, 5.5]
        for rate in rates:
            exchange_service.receive_exchange_rate("EUR", "BRL", rate)

        (exchange,) = exchange_service.list_exchanges("EUR", "BRL")
        assert exchange.rate == pytest.approx(5.5)
        assert exchange.updated_at is not None
        assert _history_count(store, exchange.id) == len(rates)

    def test_pairs_are_independent(self, exchange_service, store):
        exchange_service.receive_exchange_rate("USD", "BRL", 5.25)
        exchange_service.receive_exchange_rate("BRL", "USD", 0.19)

        usd_brl = exchange_service.get_exchange("USD", "BRL")
        brl_usd = exchange_service.get_exchange("BRL", "USD")
        assert usd_brl.id != brl_usd.id
        assert _history_count(store) == 2

    def test_filter_by_target(self, exchange_service):
        exchange_service.receive_exchange_rate("USD", "BRL", 5.25)
        exchange_service.receive_exchange_rate("EUR", "BRL", 5.75)
        exchange_service.receive_exchange_rate("GBP", "USD", 1.27)

        result = exchange_service.list_exchanges("", "BRL")

        assert len(result) == 2
        assert all(e.target_currency == "BRL" for e in result)
        assert [e.base_currency for e in result] == ["USD", "EUR"]

    @pytest.mark.parametrize(
        "base, target, expected",
        [
            ("", "", [("USD", "BRL"), ("EUR", "BRL"), ("GBP", "USD"), ("USD", "EUR")]),
            ("USD", "", [("USD", "BRL"), ("USD", "EUR")]),
            ("", "BRL", [("USD", "BRL"), ("EUR", "BRL")]),
            ("USD", "EUR", [("USD", "EUR")]),
            ("JPY", "", []),
        ],
    )
    def test_filter_combinations(self, exchange_service, base, target, expected):
        for pair_base, pair_target in [("USD", "BRL"), ("EUR", "BRL"), ("GBP", "USD"), ("USD", "EUR")]:
            exchange_service.receive_exchange_rate(pair_base, pair_target, 1.0)

        result = exchange_service.list_exchanges(base, target)

        assert [(e.base_currency, e.target_currency) for e in result] == expected

    def test_get_exchange_unknown_pair(self, exchange_service):
        assert exchange_service.get_exchange("USD", "BRL") is None

    def test_unique_constraint_on_pair(self, exchange_service, store):
        exchange_service.receive_exchange_rate("USD", "BRL", 5.25)
        with pytest.raises(StoreError):
            store.execute(
                "INSERT INTO exchanges (base_currency, target_currency, rate) VALUES (?, ?, ?)",
                ("USD", "BRL", 6.0),
            )

    def test_history_cascades_on_exchange_delete(self, exchange_service, store):
        exchange_service.receive_exchange_rate("USD", "BRL", 5.25)
        exchange_service.receive_exchange_rate("USD", "BRL", 5.50)
        exchange = exchange_service.get_exchange("USD", "BRL")

        store.execute("DELETE FROM exchanges WHERE id = ?", (exchange.id,))

        assert _history_count(store) == 0

    def test_stale_lookup_hits_unique_constraint(self, exchange_service, store):
        # Two syncs of the same pair racing: the second still sees no row
        # when it looks up, so its create collides with the first one's row.
        exchange_service.receive_exchange_rate("USD", "BRL", 5.25)

        with patch.object(exchange_service, "_get_exchange", return_value=None):
            with pytest.raises(StoreError):
                exchange_service.receive_exchange_rate("USD", "BRL", 5.30)

        (exchange,) = exchange_service.list_exchanges("USD", "BRL")
        assert exchange.rate == pytest.approx(5.25)
        assert _history_count(store, exchange.id) == 1


class TestHistoryFailure:
    @pytest.fixture
    def failing_store(self, tmp_path):
        store = FailingHistoryStore(str(tmp_path / "failing.db"))
        store.connect()
        migrate(store)
        yield store
        store.close()

    def test_non_transactional_keeps_exchange_row(self, failing_store, clock):
        service = ExchangeRateService(failing_store, clock=clock)

        with pytest.raises(StoreError, match="history insert failed"):
            service.receive_exchange_rate("USD", "BRL", 5.25)

        assert service.get_exchange("USD", "BRL") is not None

    def test_transactional_rolls_back_exchange_row(self, failing_store, clock):
        service = ExchangeRateService(failing_store, clock=clock, transactional=True)

        with pytest.raises(StoreError, match="history insert failed"):
            service.receive_exchange_rate("USD", "BRL", 5.25)

        assert service.get_exchange("USD", "BRL") is None
