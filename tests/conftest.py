from dataclasses import replace
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from customer_api.errors import UniquenessConflict
from customer_api.main import app
from customer_api.records import CustomerPage
from customer_api.repository import parse_sort
from customer_api.routes import get_customer_service
from customer_api.service import CustomerService


class InMemoryCustomerRepository:
    """Dict-backed stand-in for CustomerRepository with the same contract."""

    def __init__(self):
        self.rows = {}

    def find_all(self):
        return [replace(c) for c in self.rows.values()]

    def find_page(self, page, size, sort=None):
        column, direction = parse_sort(sort)
        customers = list(self.rows.values())
        if column != "created_at":
            customers.sort(key=lambda c: str(getattr(c, column) or ""))
        if direction == "DESC":
            customers.reverse()
        start = page * size
        return CustomerPage(
            page=page,
            size=size,
            total_elements=len(customers),
            content=[replace(c) for c in customers[start:start + size]],
        )

    def find_by_id(self, customer_id):
        customer = self.rows.get(customer_id)
        return replace(customer) if customer else None

    def find_by_email(self, email):
        for customer in self.rows.values():
            if customer.primary_email == email:
                return replace(customer)
        return None

    def exists_by_id(self, customer_id):
        return customer_id in self.rows

    def save(self, customer):
        for other in self.rows.values():
            if other.primary_email == customer.primary_email and other.customer_id != customer.customer_id:
                raise UniquenessConflict(
                    'duplicate key value violates unique constraint "customers_primary_email_key"\n'
                    f"DETAIL:  Key (primary_email)=({customer.primary_email}) already exists."
                )
        stored = replace(customer, customer_id=customer.customer_id or uuid4())
        self.rows[stored.customer_id] = stored
        return replace(stored)

    def delete_by_id(self, customer_id):
        self.rows.pop(customer_id, None)


class DummyCursor:
    def __init__(self, conn):
        self.conn = conn
        self.rowcount = 0

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        return False

    def execute(self, sql, params=None):
        self.conn.executed.append((" ".join(sql.split()), params))
        error = self.conn.errors.pop(0) if self.conn.errors else None
        if error is not None:
            raise error
        self.rowcount = self.conn.rowcount

    def fetchone(self):
        return self.conn.results.pop(0) if self.conn.results else None

    def fetchall(self):
        return self.conn.results.pop(0) if self.conn.results else []


class DummyConn:
    """Scripted psycopg2 connection: queue ``results`` and ``errors``, inspect ``executed``.

    A ``None`` entry in ``errors`` lets that statement succeed.
    """

    def __init__(self):
        self.executed = []
        self.results = []
        self.errors = []
        self.rowcount = 0
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
def repository():
    return InMemoryCustomerRepository()


@pytest.fixture()
def service(repository):
    return CustomerService(repository)


@pytest.fixture()
def client(service):
    app.dependency_overrides[get_customer_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def customer_payload():
    return {
        "givenName": "John",
        "middleInitial": "Q",
        "surname": "Doe",
        "primaryEmail": "john.doe@example.com",
        "contactNumber": "555-123-4567",
    }
