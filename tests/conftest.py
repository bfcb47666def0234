"""
Pytest configuration and fixtures.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

import telecom_cart.data.models  # noqa: F401
from telecom_cart.data.database import Base, build_engine
from telecom_cart.domain.cart import NewCartItem, PlanType
from telecom_cart.main import create_app
from telecom_cart.repos.memory_cart_store import InMemoryCartStore
from telecom_cart.repos.sql_cart_store import SqlCartStore
from telecom_cart.services.cart_service import CartService
from telecom_cart.services.snapshot_cache import CartSnapshotCache

# Use an in-memory SQLite database for testing
TEST_SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="function")
def engine():
    """
    Isolated in-memory database, one shared connection like the default app setup.
    """
    engine = build_engine(TEST_SQLALCHEMY_DATABASE_URL)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session(session_factory):
    """
    Creates a new, isolated in-memory database session for each test.
    """
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def sql_store(db_session):
    return SqlCartStore(db_session)


@pytest.fixture
def memory_store():
    return InMemoryCartStore()


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Every service test runs against both store backends."""
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def cache():
    return CartSnapshotCache()


@pytest.fixture
def service(store, cache):
    return CartService(store=store, cache=cache)


@pytest.fixture
def premium_plan():
    return NewCartItem(
        product_id="prod-001",
        product_name="Premium Data Plan",
        quantity=1,
        price=49.99,
        plan_type=PlanType.POSTPAID,
        data_allowance="50GB",
    )


@pytest.fixture
def basic_plan():
    return NewCartItem(
        product_id="prod-002",
        product_name="Basic Plan",
        quantity=2,
        price=19.99,
    )


@pytest.fixture(scope="function")
def client(session_factory):
    """
    TestClient for the SQL-backed app, sessions bound to the test database.
    """
    app = create_app(store_backend="sql", fallback_cache=True, session_factory=session_factory)

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def memory_client():
    app = create_app(store_backend="memory", fallback_cache=False)
    with TestClient(app) as test_client:
        yield test_client
