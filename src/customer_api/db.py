from pathlib import Path

import psycopg2
import psycopg2.extras

from .config import DATABASE_URL

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"

# uuid.UUID in and out of query parameters
psycopg2.extras.register_uuid()


def get_conn():
    return psycopg2.connect(
        DATABASE_URL,
        cursor_factory=psycopg2.extras.RealDictCursor,
    )


def apply_schema(conn) -> None:
    schema_sql = SCHEMA_PATH.read_text(encoding="utf-8")
    with conn.cursor() as cur:
        cur.execute(schema_sql)
    conn.commit()
