"""Postgres-backed post store (psycopg + SQL)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from policypulse.errors import DatabaseError
from policypulse.ingestion.article_types import ArticleRecord


logger = logging.getLogger(__name__)

_RETURNING = """
  id, source, source_id, title, content, url, author, published_at, is_interesting,
  embedding::text AS embedding, embedding_model, metadata, created_at, updated_at
"""


def _vector_literal(embedding: Optional[Sequence[float]]) -> Optional[str]:
    """pgvector text form: '[0.1,0.2,...]'."""
    if not embedding:
        return None
    return "[" + ",".join(repr(float(x)) for x in embedding) + "]"


def _parse_vector(text: Optional[str]) -> Optional[List[float]]:
    if not text:
        return None
    inner = text.strip().lstrip("[").rstrip("]")
    if not inner:
        return None
    return [float(x) for x in inner.split(",")]


def _row_to_record(row: Dict[str, Any]) -> ArticleRecord:
    return ArticleRecord(
        id=row["id"],
        source=row["source"],
        source_id=row["source_id"],
        title=row["title"],
        content=row["content"],
        url=row["url"],
        author=row["author"],
        published_at=row["published_at"],
        is_interesting=row["is_interesting"],
        embedding=_parse_vector(row["embedding"]),
        embedding_model=row["embedding_model"],
        metadata=dict(row["metadata"] or {}),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


@dataclass
class PostgresPostStore:
    pg_dsn: str

    def _connect(self):
        return psycopg.connect(self.pg_dsn, row_factory=dict_row)

    def exists(self, source_id: str) -> bool:
        try:
            with self._connect() as conn:
                with conn.cursor() as cur:
                    cur.execute("SELECT 1 FROM posts WHERE source_id = %s LIMIT 1", (source_id,))
                    return cur.fetchone() is not None
        except psycopg.Error as e:
            raise DatabaseError(f"exists({source_id}) failed: {e}") from e

    def insert(self, record: ArticleRecord) -> ArticleRecord:
        try:
            with self._connect() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        f"""
                        INSERT INTO posts (
                          source, source_id, title, content, url, author, published_at,
                          is_interesting, embedding, embedding_model, embedding_dims, metadata
                        )
                        VALUES (
                          %(source)s, %(source_id)s, %(title)s, %(content)s, %(url)s, %(author)s, %(published_at)s,
                          %(is_interesting)s, %(embedding)s::vector, %(embedding_model)s, %(embedding_dims)s, %(metadata)s
                        )
                        RETURNING {_RETURNING}
                        """,
                        {
                            "source": record.source,
                            "source_id": record.source_id,
                            "title": record.title,
                            "content": record.content,
                            "url": record.url,
                            "author": record.author,
                            "published_at": record.published_at,
                            "is_interesting": record.is_interesting,
                            "embedding": _vector_literal(record.embedding),
                            "embedding_model": record.embedding_model if record.embedding else None,
                            "embedding_dims": record.embedding_dimensions,
                            "metadata": Jsonb(record.metadata or {}),
                        },
                    )
                    row = cur.fetchone()
        except psycopg.Error as e:
            raise DatabaseError(f"insert({record.source_id}) failed: {e}") from e
        if row is None:
            raise DatabaseError(f"insert({record.source_id}) returned no row")
        return _row_to_record(row)

    def update_classification(
        self, post_id: int, is_interesting: Optional[bool], metadata_patch: Dict[str, Any]
    ) -> Optional[ArticleRecord]:
        try:
            with self._connect() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        f"""
                        UPDATE posts
                        SET is_interesting = %s,
                            metadata = COALESCE(metadata, '{{}}'::jsonb) || %s::jsonb
                        WHERE id = %s
                        RETURNING {_RETURNING}
                        """,
                        (is_interesting, Jsonb(metadata_patch or {}), post_id),
                    )
                    row = cur.fetchone()
        except psycopg.Error as e:
            raise DatabaseError(f"update_classification({post_id}) failed: {e}") from e
        if row is None:
            logger.warning(f"update_classification: post {post_id} not found")
            return None
        return _row_to_record(row)
