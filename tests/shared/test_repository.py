"""Tests for shared/repository.py."""

from unittest.mock import MagicMock

from shared.repository import BaseRepository


class TestBaseRepository:
    def test_init_stores_db_client(self):
        mock_db = MagicMock()
        repo = BaseRepository(mock_db)
        assert repo._db is mock_db

    def test_first_row(self):
        result = MagicMock()
        result.data = [{"id": "1"}, {"id": "2"}]
        assert BaseRepository._first_row(result) == {"id": "1"}

    def test_first_row_empty(self):
        result = MagicMock()
        result.data = []
        assert BaseRepository._first_row(result) is None

    def test_subclass_can_access_db(self):
        """Subclass should be able to access _db and use it."""
        mock_db = MagicMock()
        mock_db.table.return_value.select.return_value.execute.return_value.data = [
            {"id": "123", "name": "test"}
        ]

        class TestRepository(BaseRepository[dict]):
            def get_first(self):
                return self._first_row(self._db.table("test").select("*").execute())

        assert TestRepository(mock_db).get_first() == {"id": "123", "name": "test"}
        mock_db.table.assert_called_once_with("test")
