"""
Pytest configuration and fixtures for asset-pipeline tests

This module provides shared fixtures for unit, integration, and E2E tests.
"""
from collections.abc import AsyncGenerator, Callable, Generator
from pathlib import Path

import pytest

from asset_pipeline.core.config import PipelineSettings
from asset_pipeline.pipeline import PipelineServices, build_services
from asset_pipeline.warehouse.connection import DatabaseConnectionPool
from asset_pipeline.warehouse.ddl import ensure_schema

ASSET_HEADER = "Asset Tag,Name,Manufacturer,Status,Condition,Purchase Date,Purchase Price,Warranty Expiry"

ASSET_CSV = "\n".join([
    ASSET_HEADER,
    "LAP-001,Dell Latitude,Dell,active,good,2024-01-15,\"$1,249.00\",2027-01-15",
    "LAP-002,MacBook Pro,Apple,ACTIVE,EXCELLENT,03/02/2024,2199.99,",
    ",Orphan Monitor,LG,ACTIVE,GOOD,2023-09-01,299,",
    "MON-004,Dell U2723QE,Dell,LOST,NEW,2023-11-20,not a price,",
    "PRN-005,LaserJet,HP,,,2021-06-30,389.5,2020-01-01",
])


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests across components or against Docker containers"
    )
    config.addinivalue_line(
        "markers", "e2e: End-to-end tests through the HTTP API or CLI"
    )


# =======================
# FILE FIXTURES
# =======================

@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Empty import directory for a single test"""
    path = tmp_path / "imports"
    path.mkdir()
    return path


@pytest.fixture
def write_csv(data_dir: Path) -> Callable[[str, str], str]:
    """
    Factory writing CSV text into the import directory

    Returns:
        Function (file_id, text) -> file_id
    """
    def write(file_id: str, text: str) -> str:
        (data_dir / f"{file_id}.csv").write_text(text, encoding="utf-8")
        return file_id

    return write


@pytest.fixture
def asset_csv() -> str:
    """Five dirty asset rows: three valid, two invalid"""
    return ASSET_CSV


# =======================
# PIPELINE FIXTURES
# =======================

@pytest.fixture
def settings(data_dir: Path) -> PipelineSettings:
    """In-memory settings isolated from the environment and .env"""
    return PipelineSettings(
        _env_file=None,
        storage_backend="memory",
        data_dir=str(data_dir),
        rules_file=None,
        progress_batch_size=2,
        log_format="text",
    )


@pytest.fixture
async def services(settings: PipelineSettings) -> AsyncGenerator[PipelineServices, None]:
    """Fully wired in-memory pipeline"""
    built = build_services(settings)
    yield built
    await built.close()


# =======================
# DATABASE FIXTURES (Testcontainers)
# =======================

POSTGRES_USER = "test_pipeline"
POSTGRES_PASSWORD = "test_password"
POSTGRES_DB = "test_assets"


@pytest.fixture(scope="session")
def postgres_container() -> Generator:
    """
    Start PostgreSQL container for integration tests

    Skips the requesting tests when Docker is not available.

    Yields:
        PostgresContainer instance
    """
    testcontainers_postgres = pytest.importorskip("testcontainers.postgres")
    try:
        container = testcontainers_postgres.PostgresContainer(
            image="postgres:16.2-alpine",
            username=POSTGRES_USER,
            password=POSTGRES_PASSWORD,
            dbname=POSTGRES_DB,
        )
        container.start()
    except Exception as e:
        pytest.skip(f"Docker is not available: {e}")

    try:
        yield container
    finally:
        container.stop()


@pytest.fixture
def db_pool(postgres_container) -> Generator[DatabaseConnectionPool, None, None]:
    """
    Open pool over a clean schema for a single test

    Yields:
        DatabaseConnectionPool with empty pipeline tables
    """
    pool = DatabaseConnectionPool(
        host=postgres_container.get_container_host_ip(),
        port=int(postgres_container.get_exposed_port(5432)),
        database=POSTGRES_DB,
        user=POSTGRES_USER,
        password=POSTGRES_PASSWORD,
        min_size=1,
        max_size=4,
    )
    pool.open()
    ensure_schema(pool)
    pool.execute_command("TRUNCATE TABLE staging_asset, import_job, asset CASCADE")

    yield pool

    pool.close()
