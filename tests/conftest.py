import os

import psycopg2
import psycopg2.extras
import pytest
from dotenv import load_dotenv
from fastapi.testclient import TestClient

from crm.db import init_schema
from crm.main import app
from crm.models import Customer
from crm.repository import InMemoryCustomerRepository
from crm.routes import get_repository

load_dotenv()


class DummyCursor:
    def __init__(self, conn):
        self.conn = conn
        self.description = None
        self._rows = []

    def __enter__(self):
        return self

    def __exit__(self, *_exc):
        return False

    def execute(self, sql, params=None):
        self.conn.executed.append((" ".join(sql.split()), params))
        if self.conn.errors:
            raise self.conn.errors.pop(0)
        result = self.conn.results.pop(0) if self.conn.results else None
        if result is None:
            self._rows = []
            self.description = None
        else:
            self._rows = result if isinstance(result, list) else [result]
            self.description = [("column",)]

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def fetchall(self):
        return list(self._rows)


class DummyConn:
    """psycopg2 connection stand-in that replays queued results."""

    def __init__(self):
        self.results = []
        self.errors = []
        self.executed = []
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    def cursor(self):
        return DummyCursor(self)

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        self.closed = True


@pytest.fixture()
def dummy_conn():
    return DummyConn()


@pytest.fixture()
def matay():
    return Customer(id=1, name="Matay", email="matay@code.com", age=25)


@pytest.fixture()
def memory_repo():
    return InMemoryCustomerRepository()


@pytest.fixture()
def client(memory_repo):
    app.dependency_overrides[get_repository] = lambda: memory_repo
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def db_conn():
    if not os.getenv("DATABASE_URL"):
        pytest.skip("DATABASE_URL is not set")
    conn = psycopg2.connect(
        os.environ["DATABASE_URL"],
        cursor_factory=psycopg2.extras.RealDictCursor,
    )
    init_schema(conn)
    yield conn
    conn.close()


@pytest.fixture()
def reset_db(db_conn):
    with db_conn.cursor() as cur:
        cur.execute("TRUNCATE TABLE customer RESTART IDENTITY")
    db_conn.commit()
