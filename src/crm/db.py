from pathlib import Path

import psycopg2
import psycopg2.extras

from .config import get_database_url

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"


def get_conn():
    return psycopg2.connect(
        get_database_url(),
        cursor_factory=psycopg2.extras.RealDictCursor,
    )


def init_schema(conn) -> None:
    schema_sql = SCHEMA_PATH.read_text(encoding="utf-8")
    with conn.cursor() as cur:
        cur.execute(schema_sql)
    conn.commit()
