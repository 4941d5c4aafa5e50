import pytest
from sqlalchemy import inspect

from salesboard.database import TransactionStore


class TestTransactionStore:
    def test_session_before_connect_raises(self):
        with pytest.raises(RuntimeError):
            TransactionStore("sqlite://").session()

    def test_engine_before_connect_raises(self):
        with pytest.raises(RuntimeError):
            TransactionStore("sqlite://").engine

    def test_connect_creates_table(self, tmp_path):
        store = TransactionStore(f"sqlite:///{tmp_path / 'a.db'}")
        store.connect()
        try:
            assert "transactions" in inspect(store.engine).get_table_names()
        finally:
            store.close()

    def test_connect_and_close_are_idempotent(self):
        store = TransactionStore("sqlite://")
        store.connect()
        engine = store.engine
        store.connect()
        assert store.engine is engine
        store.close()
        store.close()
        assert not store.connected

    def test_memory_database_shared_between_sessions(self):
        from salesboard.models import Transaction

        store = TransactionStore("sqlite://")
        store.connect()
        try:
            first = store.session()
            first.add(Transaction(title="x", price=1.0))
            first.commit()
            first.close()
            second = store.session()
            try:
                assert second.query(Transaction).count() == 1
            finally:
                second.close()
        finally:
            store.close()
