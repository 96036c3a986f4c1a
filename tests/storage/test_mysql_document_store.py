from __future__ import annotations

import json

from src.school_billing.school_billing.core.enums import Collection
from src.school_billing.school_billing.database.mysql_document_store import MySQLDocumentStore


class FakeCursor:
    def __init__(self, rows):
        self.rows = rows
        self.executed = []
        self.rowcount = 0

    def execute(self, sql, params=()):
        self.executed.append((" ".join(sql.split()), params))

    def fetchone(self):
        return self.rows[0] if self.rows else None

    def fetchall(self):
        return self.rows

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        pass

    def rollback(self):
        pass

    def close(self):
        pass


class FakeConnectionFactory:
    def __init__(self, rows):
        self.cursor = FakeCursor(rows)

    def connect(self, *, with_database: bool = True):
        return FakeConnection(self.cursor)


def test_list_filters_in_sql():
    body = json.dumps({"enrollmentId": "enr-1", "monthYear": "2025-01", "isPaid": False})
    factory = FakeConnectionFactory([{"doc_id": "enr-1-2025-01", "body": body}])
    store = MySQLDocumentStore(factory)

    docs = store.list(Collection.INSTALLMENTS, enrollmentId="enr-1", isPaid=False)

    assert docs == [{"id": "enr-1-2025-01", "enrollmentId": "enr-1", "monthYear": "2025-01", "isPaid": False}]
    sql, params = factory.cursor.executed[0]
    assert sql.count("JSON_EXTRACT(body, %s) = CAST(%s AS JSON)") == 2
    assert params == ("installments", '$."enrollmentId"', '"enr-1"', '$."isPaid"', "false")


def test_list_without_filters_selects_whole_collection():
    factory = FakeConnectionFactory([])
    store = MySQLDocumentStore(factory)

    assert store.list("payments") == []
    sql, params = factory.cursor.executed[0]
    assert "JSON_EXTRACT" not in sql
    assert params == ("payments",)
