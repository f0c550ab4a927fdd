"""Postgres schema management for PolicyPulse.

Schema creation is idempotent (CREATE IF NOT EXISTS), so it is safe to run on
every worker start.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

import psycopg


SCHEMA_STATEMENTS: List[str] = [
    "CREATE EXTENSION IF NOT EXISTS vector;",
    """
    CREATE TABLE IF NOT EXISTS posts (
      id BIGSERIAL PRIMARY KEY,
      source TEXT NOT NULL,
      source_id TEXT NOT NULL UNIQUE,
      title TEXT NOT NULL,
      content TEXT NOT NULL,
      url TEXT NOT NULL,
      author TEXT,
      published_at TIMESTAMPTZ NOT NULL,
      is_interesting BOOLEAN DEFAULT NULL,
      embedding vector,
      embedding_model TEXT,
      embedding_dims INTEGER,
      metadata JSONB NOT NULL DEFAULT '{}'::jsonb,
      created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
      updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    );
    """,
    # Backward-compatible column adds (safe if table already exists)
    "ALTER TABLE posts ADD COLUMN IF NOT EXISTS embedding_model TEXT;",
    "ALTER TABLE posts ADD COLUMN IF NOT EXISTS embedding_dims INTEGER;",
    "CREATE INDEX IF NOT EXISTS idx_posts_published_at ON posts (published_at DESC);",
    "CREATE INDEX IF NOT EXISTS idx_posts_is_interesting ON posts (is_interesting);",
    "CREATE INDEX IF NOT EXISTS idx_posts_source ON posts (source);",
    "CREATE INDEX IF NOT EXISTS idx_posts_created_at ON posts (created_at DESC);",
    """
    CREATE OR REPLACE FUNCTION posts_touch_updated_at()
    RETURNS TRIGGER AS $$
    BEGIN
      NEW.updated_at = now();
      RETURN NEW;
    END;
    $$ LANGUAGE plpgsql;
    """,
    "DROP TRIGGER IF EXISTS trg_posts_updated_at ON posts;",
    """
    CREATE TRIGGER trg_posts_updated_at BEFORE UPDATE ON posts
      FOR EACH ROW EXECUTE FUNCTION posts_touch_updated_at();
    """,
]


def ensure_postgres_schema(pg_dsn: str, *, statements: Optional[Iterable[str]] = None) -> None:
    """Ensure Postgres schema exists."""
    stmts = list(statements) if statements is not None else SCHEMA_STATEMENTS
    with psycopg.connect(pg_dsn, autocommit=True) as conn:
        with conn.cursor() as cur:
            for s in stmts:
                cur.execute(s)
