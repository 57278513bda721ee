import logging
import re
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, List, Optional

import psycopg2
from psycopg2.errors import UniqueViolation

from .db import get_conn
from .errors import DuplicateResourceError, StorageUnavailableError
from .models import Customer

logger = logging.getLogger(__name__)

EMAIL_CONSTRAINT = "customer_email_unique"


class CustomerRepository(ABC):
    """Storage port used by the customer service.

    Email uniqueness is the service's rule; implementations store what
    they are given unless the backend itself rejects it.
    """

    @abstractmethod
    def list_all(self) -> List[Customer]:
        pass

    @abstractmethod
    def get_by_id(self, customer_id: int) -> Optional[Customer]:
        pass

    @abstractmethod
    def insert(self, customer: Customer) -> Customer:
        """Store a customer without an id and return it with its new id."""

    @abstractmethod
    def delete_by_id(self, customer_id: int) -> None:
        pass

    @abstractmethod
    def update(self, customer: Customer) -> None:
        """Replace the stored customer that has ``customer.id``."""

    @abstractmethod
    def exists_by_email(self, email: str) -> bool:
        pass

    @abstractmethod
    def exists_by_id(self, customer_id: int) -> bool:
        pass


class InMemoryCustomerRepository(CustomerRepository):
    # self.lock guards customers and next_id, so concurrent inserts never
    # share an id. The service's email check runs outside it: two
    # concurrent registrations with the same email can both pass.
    def __init__(self, customers: Optional[Iterable[Customer]] = None):
        self.customers: Dict[int, Customer] = {}
        self.next_id = 1
        self.lock = threading.Lock()
        for customer in customers or []:
            if customer.id is None:
                self.insert(customer)
            else:
                self.customers[customer.id] = customer.model_copy()
                self.next_id = max(self.next_id, customer.id + 1)

    def list_all(self) -> List[Customer]:
        with self.lock:
            return [c.model_copy() for c in self.customers.values()]

    def get_by_id(self, customer_id: int) -> Optional[Customer]:
        with self.lock:
            customer = self.customers.get(customer_id)
        return customer.model_copy() if customer else None

    def insert(self, customer: Customer) -> Customer:
        with self.lock:
            stored = customer.model_copy(update={"id": self.next_id})
            self.next_id += 1
            self.customers[stored.id] = stored
        return stored.model_copy()

    def delete_by_id(self, customer_id: int) -> None:
        with self.lock:
            self.customers.pop(customer_id, None)

    def update(self, customer: Customer) -> None:
        if customer.id is None:
            raise ValueError("Cannot update a customer without an id")
        with self.lock:
            self.customers[customer.id] = customer.model_copy()
            self.next_id = max(self.next_id, customer.id + 1)

    def exists_by_email(self, email: str) -> bool:
        with self.lock:
            return any(c.email == email for c in self.customers.values())

    def exists_by_id(self, customer_id: int) -> bool:
        with self.lock:
            return customer_id in self.customers


def row_to_customer(row: Dict[str, Any]) -> Customer:
    return Customer(id=row["id"], name=row["name"], email=row["email"], age=row["age"])


def violated_constraint(error: UniqueViolation) -> Optional[str]:
    name = error.diag.constraint_name
    if name:
        return name
    # Errors raised without a server result carry no diagnostics.
    match = re.search(r'constraint "([^"]+)"', str(error))
    return match.group(1) if match else None


class PostgresCustomerRepository(CustomerRepository):
    """Customer storage on the ``customer`` table.

    ``connect`` returns a new psycopg2 connection with a dict-row cursor
    factory; each call opens, commits and closes its own connection.
    """

    def __init__(self, connect: Callable[[], Any]):
        self.connect = connect

    def _conn(self):
        try:
            return self.connect()
        except psycopg2.OperationalError as e:
            logger.error("Could not connect to the customer database: %s", e)
            raise StorageUnavailableError(str(e)) from e

    def _fetch(self, sql: str, params: tuple = (), many: bool = False):
        conn = self._conn()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                if many:
                    return cur.fetchall() or []
                return cur.fetchone()
        except psycopg2.OperationalError as e:
            raise StorageUnavailableError(str(e)) from e
        finally:
            conn.close()

    def _write(self, sql: str, params: tuple):
        conn = self._conn()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, params)
                row = cur.fetchone() if cur.description else None
            conn.commit()
            return row
        except UniqueViolation as e:
            conn.rollback()
            if violated_constraint(e) == EMAIL_CONSTRAINT:
                raise DuplicateResourceError() from e
            logger.error("Unexpected unique violation on customer: %s", e)
            raise
        except psycopg2.OperationalError as e:
            raise StorageUnavailableError(str(e)) from e
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def list_all(self) -> List[Customer]:
        rows = self._fetch(
            """
            SELECT id, name, email, age
            FROM customer
            ORDER BY id
            """,
            many=True,
        )
        return [row_to_customer(r) for r in rows]

    def get_by_id(self, customer_id: int) -> Optional[Customer]:
        row = self._fetch(
            """
            SELECT id, name, email, age
            FROM customer
            WHERE id = %s
            """,
            (customer_id,),
        )
        return row_to_customer(row) if row else None

    def insert(self, customer: Customer) -> Customer:
        row = self._write(
            """
            INSERT INTO customer (name, email, age)
            VALUES (%s, %s, %s)
            RETURNING id, name, email, age
            """,
            (customer.name, customer.email, customer.age),
        )
        return row_to_customer(row)

    def delete_by_id(self, customer_id: int) -> None:
        self._write(
            """
            DELETE FROM customer
            WHERE id = %s
            """,
            (customer_id,),
        )

    def update(self, customer: Customer) -> None:
        if customer.id is None:
            raise ValueError("Cannot update a customer without an id")
        self._write(
            """
            INSERT INTO customer (id, name, email, age)
            VALUES (%s, %s, %s, %s)
            ON CONFLICT (id) DO UPDATE
            SET name = EXCLUDED.name, email = EXCLUDED.email, age = EXCLUDED.age
            """,
            (customer.id, customer.name, customer.email, customer.age),
        )

    def exists_by_email(self, email: str) -> bool:
        row = self._fetch(
            "SELECT EXISTS (SELECT 1 FROM customer WHERE email = %s) AS found",
            (email,),
        )
        return bool(row and row["found"])

    def exists_by_id(self, customer_id: int) -> bool:
        row = self._fetch(
            "SELECT EXISTS (SELECT 1 FROM customer WHERE id = %s) AS found",
            (customer_id,),
        )
        return bool(row and row["found"])


def create_repository(storage: str, connect: Optional[Callable[[], Any]] = None) -> CustomerRepository:
    if storage == "memory":
        return InMemoryCustomerRepository()
    if storage == "postgres":
        return PostgresCustomerRepository(connect or get_conn)
    raise ValueError(f"Unknown customer storage: {storage!r}")
