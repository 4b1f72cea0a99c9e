"""Test configuration for MongoDB persistence package."""

import pytest

from occ_persistence_mongo import MongoConnectionManager

pytest_plugins = ["pytest_asyncio"]


@pytest.fixture
async def mongo_connection():
    """Create a MongoDB connection for testing."""
    # Use mongomock for unit tests to avoid real database dependency
    try:
        from mongomock_motor import AsyncMongoMockClient
    except ImportError:
        pytest.skip("mongomock-motor not installed")

    connection = MongoConnectionManager("mongodb://mock:27017", database="test_db")
    connection._client = AsyncMongoMockClient(default_database_name="test_db")

    # Make connect() return the client and mark as "connected"
    async def _mock_connect():
        return connection._client

    connection.connect = _mock_connect

    yield connection


@pytest.fixture
def mongo_collection(mongo_connection):
    """The mock collection used by store and migration tests."""
    return mongo_connection.collection("documents")


@pytest.fixture(scope="module")
def mongo_container():
    """Create a MongoDB container using testcontainers."""
    pytest.importorskip("testcontainers")

    from testcontainers.mongodb import MongoDbContainer

    mongo = MongoDbContainer("mongo:7.0")
    try:
        mongo.start()
    except Exception as e:  # noqa: BLE001
        pytest.skip(f"MongoDB container unavailable: {e}")
    yield mongo
    mongo.stop()


@pytest.fixture
async def real_mongo_connection(mongo_container):
    """
    Create a real MongoDB connection using testcontainers.

    Function scope avoids "Event loop is closed" when tests run in different
    loops. Drops the test collection before each test for isolation.
    """
    connection = MongoConnectionManager(
        url=mongo_container.get_connection_url(), database="test_db"
    )
    await connection.connect()
    await connection.collection("documents").drop()

    yield connection

    connection.close()
