"""Tests for the SQL namespace store and its repositories.

These tests use SQLite in-memory database for fast testing
without requiring a MySQL server.
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.dialects import mysql
from sqlalchemy.exc import OperationalError
from sqlalchemy.schema import CreateTable

from docspace.components.namespace.errors import StoreUnavailable
from docspace.components.namespace.sql_storage import NamespaceSqlStorage
from docspace.db.models import FileRecord, FolderRecord
from docspace.db.mysql import check_connection, create_session_factory, session_scope
from docspace.repositories import file_repository, folder_repository
from docspace.settings import MAX_PATH_LENGTH

from tests.factories import make_file, make_folder


@pytest.fixture
def session_factory(sql_engine):
    return create_session_factory(sql_engine)


class TestFolderRepository:
    """FolderRepository queries."""

    def test_create_and_get_by_path(self, session_factory):
        """Rows are found by unique path."""
        with session_scope(session_factory) as db:
            folder_repository.create(
                db,
                {
                    "id": "fld_1",
                    "name": "A",
                    "path": "A",
                    "depth": 1,
                    "parent_path": None,
                    "order": 1,
                    "created_at": 1000,
                    "created_by": "tester",
                },
            )

        with session_scope(session_factory) as db:
            row = folder_repository.get_by_path(db, "A")
            assert row is not None
            assert row.id == "fld_1"
            assert row.order == 1

    def test_list_by_parent_orders_siblings(self, sql_storage, session_factory):
        """Children come back by sort order."""
        sql_storage.insert_folder(make_folder("P"))
        sql_storage.insert_folder(make_folder("P/C", order=2))
        sql_storage.insert_folder(make_folder("P/A", order=1))

        with session_scope(session_factory) as db:
            rows = folder_repository.list_by_parent(db, "P")
            assert [r.path for r in rows] == ["P/A", "P/C"]
            assert folder_repository.count_by_parent(db, None) == 1

    def test_list_under_escapes_wildcards(self, sql_storage, session_factory):
        """LIKE wildcards in a prefix match literally."""
        sql_storage.insert_folder(make_folder("a_b"))
        sql_storage.insert_folder(make_folder("a_b/c"))
        sql_storage.insert_folder(make_folder("axb"))
        sql_storage.insert_folder(make_folder("axb/c"))

        with session_scope(session_factory) as db:
            rows = folder_repository.list_under(db, "a_b")
            assert {r.path for r in rows} == {"a_b", "a_b/c"}

    def test_order_column_name(self):
        """order is stored in the sort_order column."""
        assert FolderRecord.__table__.c.sort_order is not None

    @pytest.mark.parametrize("table", [FolderRecord.__table__, FileRecord.__table__])
    def test_indexed_paths_fit_mysql_key_limit(self, table):
        """Indexed path columns fit a utf8mb4 InnoDB key (3072 bytes)."""
        indexed = {col.name for index in table.indexes for col in index.columns}
        indexed |= {col.name for col in table.columns if col.unique}
        for name in indexed & {"path", "parent_path", "container_path"}:
            assert table.c[name].type.length * 4 <= 3072

        ddl = str(CreateTable(table).compile(dialect=mysql.dialect()))
        assert f"VARCHAR({MAX_PATH_LENGTH})" in ddl


class TestFileRepository:
    """FileRepository queries."""

    def test_list_by_container(self, sql_storage, session_factory):
        """Rows come back oldest upload first."""
        sql_storage.insert_file(make_file("b.txt", "A", "fil_2", uploaded_at=2))
        sql_storage.insert_file(make_file("a.txt", "A", "fil_1", uploaded_at=1))
        sql_storage.insert_file(make_file("c.txt", "A/B", "fil_3", uploaded_at=3))

        with session_scope(session_factory) as db:
            assert [r.id for r in file_repository.list_by_container(db, "A")] == ["fil_1", "fil_2"]
            assert file_repository.count_by_container(db, "A/B") == 1
            assert {r.id for r in file_repository.list_under(db, "A")} == {"fil_1", "fil_2", "fil_3"}


class TestSqlStorageRoundTrip:
    """Row <-> record conversion."""

    def test_folder_fields_survive(self, sql_storage):
        """Provenance and ordering fields are preserved."""
        folder = make_folder("A/B", order=3).model_copy(update={"updatedAt": 2000, "updatedBy": "editor"})
        sql_storage.insert_folder(folder)

        assert sql_storage.get_folder(folder.id) == folder

    def test_file_fields_survive(self, sql_storage):
        """Every file field is preserved."""
        file = make_file("Report.PDF", "A", "fil_1", size=4096)
        sql_storage.insert_file(file)

        assert sql_storage.get_file("fil_1") == file


class TestSqlStorageFailures:
    """Driver errors."""

    def test_operational_error_is_store_unavailable(self):
        """Driver failures become StoreUnavailable."""
        session = MagicMock()
        session.get.side_effect = OperationalError("SELECT", {}, Exception("server has gone away"))
        factory = MagicMock(return_value=session)
        storage = NamespaceSqlStorage(session_factory=factory)

        with pytest.raises(StoreUnavailable):
            storage.get_folder("fld_1")
        session.rollback.assert_called_once()
        session.close.assert_called_once()

    def test_duplicate_file_id_is_store_unavailable(self, sql_storage):
        """A second insert with the same file id is rejected by the store."""
        sql_storage.insert_file(make_file("a.txt", "A", "fil_1"))

        with pytest.raises(StoreUnavailable):
            sql_storage.insert_file(make_file("b.txt", "A", "fil_1"))
        assert sql_storage.get_file("fil_1").name == "a.txt"

    def test_check_connection(self, sql_engine):
        """A live engine passes the connection check."""
        assert check_connection(sql_engine)
