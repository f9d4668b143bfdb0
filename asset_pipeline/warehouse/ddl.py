"""
DDL for the PostgreSQL-backed stores.
"""

from .connection import DatabaseConnectionPool

SCHEMA_STATEMENTS = (
    """
    CREATE TABLE IF NOT EXISTS import_job (
        id TEXT PRIMARY KEY,
        source_file_id TEXT NOT NULL,
        status TEXT NOT NULL,
        phase TEXT NOT NULL,
        payload JSONB NOT NULL,
        created_at TIMESTAMPTZ NOT NULL,
        updated_at TIMESTAMPTZ NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_import_job_created_at ON import_job (created_at DESC)",
    """
    CREATE TABLE IF NOT EXISTS staging_asset (
        job_id TEXT NOT NULL REFERENCES import_job (id) ON DELETE CASCADE,
        row_number INTEGER NOT NULL,
        raw_data JSONB NOT NULL,
        mapped_data JSONB NOT NULL,
        is_valid BOOLEAN NOT NULL,
        will_import BOOLEAN NOT NULL,
        errors JSONB,
        PRIMARY KEY (job_id, row_number),
        CHECK (NOT (will_import AND NOT is_valid))
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS asset (
        id UUID PRIMARY KEY,
        asset_tag VARCHAR(50) NOT NULL UNIQUE,
        name VARCHAR(200) NOT NULL,
        description VARCHAR(255),
        manufacturer VARCHAR(255),
        model_number VARCHAR(255),
        serial_number VARCHAR(255),
        status VARCHAR(32) NOT NULL,
        condition VARCHAR(32) NOT NULL,
        building_name VARCHAR(255),
        floor VARCHAR(255),
        room VARCHAR(255),
        location VARCHAR(255),
        purchase_date DATE,
        purchase_price NUMERIC(14, 2),
        warranty_expiration DATE,
        notes VARCHAR(255),
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
)


def ensure_schema(pool: DatabaseConnectionPool) -> None:
    """Create the pipeline tables if they do not exist."""
    with pool.get_connection() as conn:
        with conn.cursor() as cur:
            for statement in SCHEMA_STATEMENTS:
                cur.execute(statement)
        conn.commit()
