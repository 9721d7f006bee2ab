import pytest
import pytest_asyncio
from testcontainers.postgres import PostgresContainer

from gallery_cms.services import GalleryServices
from gallery_cms.store import (
    PAGES_TABLE,
    PAINTINGS_TABLE,
    SETTINGS_TABLE,
    PostgresStore,
    create_schema,
)
from tests.memory_store import InMemoryStore


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def services(store):
    return GalleryServices.from_store(store)


@pytest.fixture
def paintings(services):
    return services.paintings


@pytest.fixture
def pages(services):
    return services.pages


@pytest.fixture
def settings_service(services):
    return services.settings


@pytest.fixture(scope="session")
def postgres_dsn():
    """Start a PostgreSQL test container for the session."""
    try:
        container = PostgresContainer("postgres:17")
        container.start()
    except Exception as exc:
        pytest.skip(f"PostgreSQL container unavailable: {exc}")

    host = container.get_container_host_ip()
    port = container.get_exposed_port(5432)
    try:
        yield f"postgresql://{container.username}:{container.password}@{host}:{port}/{container.dbname}"
    finally:
        container.stop()


@pytest_asyncio.fixture
async def pg_store(postgres_dsn):
    """A store over a fresh pool with empty gallery tables."""
    # A new pool per test avoids sharing connections across event loops
    pool = await PostgresStore.create_pool(postgres_dsn, min_size=1, max_size=5)
    store = PostgresStore(pool=pool)
    await create_schema(store)
    await store.execute_script(
        f"TRUNCATE {PAINTINGS_TABLE}, {PAGES_TABLE}, {SETTINGS_TABLE}"
    )
    try:
        yield store
    finally:
        await pool.close()


@pytest.fixture
def pg_services(pg_store):
    return GalleryServices.from_store(pg_store)
