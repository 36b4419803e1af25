"""Category taxonomy built from breadcrumb strings.

A breadcrumb such as ``"Home > Kitchen > Mugs"`` becomes a chain of
``category_nodes`` rows, one per segment. A node is identified by its name,
its parent and its depth, so ``"A > B"`` and ``"C > B"`` produce two distinct
``B`` nodes. Nodes are only ever inserted.

Uniqueness is enforced by the ``uq_category_nodes_name_parent_level``
constraint; creation goes through ``INSERT ... ON CONFLICT DO NOTHING`` and
falls back to reading the row that won the race.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable

from sqlalchemy import insert, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from db.clients.rds_storage_client import db_session
from models.category_node import ROOT_PARENT_KEY, CategoryNode, CategoryNodeORM

logger = logging.getLogger(__name__)

# Separators seen in scraped breadcrumbs, including the HTML-escaped '>'
DELIMITER_PATTERN = re.compile(r"\s*(?:&gt;|>|›|»|\|)\s*")

UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

UNIQUE_COLUMNS = ["name", "parent_key", "level"]


def split_breadcrumb(breadcrumb) -> list[str]:
    """Split a breadcrumb into trimmed, non-empty segments from root to leaf.

    Already split breadcrumbs (lists of segments) are accepted as well.
    """
    if breadcrumb is None:
        return []
    if isinstance(breadcrumb, (list, tuple)):
        segments = [str(segment) for segment in breadcrumb if segment is not None]
    else:
        segments = DELIMITER_PATTERN.split(str(breadcrumb))
    return [segment.strip() for segment in segments if segment.strip()]


def parent_key_of(parent_id: int | None) -> int:
    return ROOT_PARENT_KEY if parent_id is None else parent_id


class CategoryTree:
    """Reads and extends the category tree through one SQLAlchemy session.

    Writes are flushed but not committed: the caller owns the transaction.
    """

    def __init__(self, session: Session):
        self.session = session

    def resolve_path(self, breadcrumb) -> int | None:
        """Walk ``breadcrumb`` creating missing nodes and return the leaf node id.

        An empty breadcrumb is a no-op and returns ``None``.
        """
        return self.resolve_segments(split_breadcrumb(breadcrumb))

    def resolve_segments(self, segments: Iterable[str]) -> int | None:
        parent_id = None
        for level, name in enumerate(segments):
            parent_id = self.get_or_create(name, parent_id, level)
        return parent_id

    def find(self, name: str, parent_id: int | None, level: int) -> int | None:
        return self.session.scalar(
            select(CategoryNodeORM.id).where(
                CategoryNodeORM.name == name,
                CategoryNodeORM.parent_key == parent_key_of(parent_id),
                CategoryNodeORM.level == level,
            )
        )

    def get_or_create(self, name: str, parent_id: int | None, level: int) -> int:
        node_id = self.find(name, parent_id, level)
        if node_id is not None:
            return node_id
        node_id = self._insert_or_ignore(name, parent_id, level)
        if node_id is None:
            # Another writer created it between our read and our insert
            node_id = self.find(name, parent_id, level)
        logger.debug("[CategoryTree] %s (parent=%s, level=%s) -> %s", name, parent_id, level, node_id)
        return node_id

    def _insert_or_ignore(self, name: str, parent_id: int | None, level: int) -> int | None:
        values = {
            "name": name,
            "parent_id": parent_id,
            "parent_key": parent_key_of(parent_id),
            "level": level,
        }
        dialect = self.session.get_bind().dialect.name
        upsert = UPSERT_INSERTS.get(dialect)
        if upsert is not None:
            statement = (
                upsert(CategoryNodeORM)
                .values(**values)
                .on_conflict_do_nothing(index_elements=UNIQUE_COLUMNS)
                .returning(CategoryNodeORM.id)
            )
            return self.session.scalar(statement)

        # Dialects without ON CONFLICT: let the constraint reject the duplicate
        try:
            with self.session.begin_nested():
                return self.session.scalar(insert(CategoryNodeORM).values(**values).returning(CategoryNodeORM.id))
        except IntegrityError:
            return None

    def children_of(self, parent_id: int | None = None) -> list[CategoryNode]:
        """Immediate children of ``parent_id`` (roots when ``None``), ordered by name."""
        nodes = self.session.scalars(
            select(CategoryNodeORM)
            .where(CategoryNodeORM.parent_key == parent_key_of(parent_id))
            .order_by(CategoryNodeORM.name, CategoryNodeORM.id)
        ).all()
        return [CategoryNode.model_validate(node) for node in nodes]

    def get(self, node_id: int) -> CategoryNode | None:
        node = self.session.get(CategoryNodeORM, node_id)
        return CategoryNode.model_validate(node) if node else None


def resolve_path(breadcrumb, session_maker=None) -> int | None:
    """Resolve ``breadcrumb`` in its own transaction and return the leaf node id."""
    with db_session(session_maker) as session:
        leaf_id = CategoryTree(session).resolve_path(breadcrumb)
        session.commit()
        return leaf_id


def children_of(parent_id: int | None = None, session_maker=None) -> list[CategoryNode]:
    with db_session(session_maker) as session:
        return CategoryTree(session).children_of(parent_id)
