import httpx
import pytest
from fastapi.testclient import TestClient

from salesboard.database import TransactionStore
from salesboard.main import create_app
from salesboard.services.seeder import seed_transactions

SEED_URL = "http://seed.test/product_transaction.json"

# March (UTC): 7 rows, including one whose local date is 1 April (+05:30)
# and one from a different year. April: 1 row. November: 1 row.
SAMPLE_FEED = [
    {"title": "USB hub", "description": "4 ports", "price": 50.0, "category": "electronics",
     "dateOfSale": "2021-03-05T10:00:00Z", "sold": True},
    {"title": "Ring", "description": "silver", "price": 150.0, "category": "jewelery",
     "dateOfSale": "2021-03-10T10:00:00Z", "sold": False},
    {"title": "Monitor", "description": "27 inch", "price": 1000.0, "category": "electronics",
     "dateOfSale": "2021-03-15T10:00:00+05:30", "sold": True},
    {"title": "Jacket", "description": "leather", "price": 999.99, "category": "men's clothing",
     "dateOfSale": "2021-03-20T10:00:00Z", "sold": False},
    {"title": "Bracelet", "description": "gold plated", "price": 250.0, "category": "jewelery",
     "dateOfSale": "2021-03-25T10:00:00Z"},
    {"title": "Coat", "description": "wool", "price": 2500.0, "category": "women's clothing",
     "dateOfSale": "2021-04-01T02:00:00+05:30", "sold": True},
    {"title": "Mouse", "description": "wireless", "price": 120.0, "category": "electronics",
     "dateOfSale": "2021-04-10T10:00:00Z", "sold": True},
    {"title": "Cable", "description": "HDMI", "price": 90.0, "category": "electronics",
     "dateOfSale": "2022-03-02T10:00:00Z", "sold": False},
    {"id": 99, "title": "Shirt", "description": "cotton", "price": 329.85, "category": "men's clothing",
     "image": "https://example.test/shirt.jpg", "dateOfSale": "2021-11-27T20:29:54+05:30", "sold": False},
]

MARCH_COUNT = 7


def feed_transport(payload=SAMPLE_FEED, status_code: int = 200) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=payload)

    return httpx.MockTransport(handler)


@pytest.fixture
def store(tmp_path):
    # File-backed so concurrent requests each get their own connection.
    s = TransactionStore(f"sqlite:///{tmp_path / 'salesboard.db'}")
    s.connect()
    yield s
    s.close()


@pytest.fixture
def db(store):
    session = store.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded_store(store):
    session = store.session()
    try:
        seed_transactions(session, SAMPLE_FEED)
    finally:
        session.close()
    return store


@pytest.fixture
def seeded_app(seeded_store):
    return create_app(seeded_store, seed_url=SEED_URL, seed_transport=feed_transport())


@pytest.fixture
def client(seeded_app):
    with TestClient(seeded_app) as c:
        yield c
