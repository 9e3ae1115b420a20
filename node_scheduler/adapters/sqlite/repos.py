"""
SQLite node store.

Implements NodeStorePort on three tables: nodes (one row per node),
node_revisions (one row per revision) and node_field_revisions (one row per
language variant of a revision). The latest revision of a node is the one
with the highest vid.
"""

from __future__ import annotations

import sqlite3
from typing import Any

from node_scheduler.components.scheduler.query import Condition, NodeQuery
from node_scheduler.domain.entities import Node, NodeRevision

# Node fields stored on the nodes table rather than per variant.
_NODE_COLUMNS = {"type": "n.type"}

_VARIANT_SELECT = """
    SELECT f.*, n.type, n.default_langcode, r.revision_log, r.revision_timestamp
    FROM node_field_revisions f
    JOIN nodes n ON n.nid = f.nid
    JOIN node_revisions r ON r.vid = f.vid
"""


# -----------------------------------------------------------------------------
# Helper functions
# -----------------------------------------------------------------------------


def dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    """Convert SQLite row to dictionary."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def _column(field_name: str) -> str:
    return _NODE_COLUMNS.get(field_name, f"f.{field_name}")


def _condition_sql(condition: Condition) -> tuple[str, list[Any]]:
    column = _column(condition.field)
    if condition.operator == "EXISTS":
        return f"{column} IS NOT NULL", []
    if condition.operator == "IN":
        values = list(condition.value)
        if not values:
            return "0", []
        placeholders = ", ".join("?" for _ in values)
        return f"{column} IN ({placeholders})", values
    return f"{column} {condition.operator} ?", [condition.value]


def _map_row(row: dict[str, Any]) -> Node:
    return Node(
        nid=row["nid"],
        vid=row["vid"],
        type=row["type"],
        langcode=row["langcode"],
        title=row["title"],
        status=bool(row["status"]),
        publish_on=row["publish_on"],
        unpublish_on=row["unpublish_on"],
        created=row["created"],
        changed=row["changed"],
        revision_log=row["revision_log"],
        revision_timestamp=row["revision_timestamp"],
        moderation_state=row["moderation_state"],
    )


# -----------------------------------------------------------------------------
# Node Store
# -----------------------------------------------------------------------------


class SQLiteNodeStore:
    """SQLite implementation of NodeStorePort."""

    def __init__(self, db_path: str, connection: sqlite3.Connection | None = None):
        self.db_path = db_path
        self._external_conn = connection
        if connection is not None:
            connection.row_factory = dict_factory

    def _get_conn(self) -> sqlite3.Connection:
        """Get database connection (uses external if provided)."""
        if self._external_conn is not None:
            return self._external_conn

        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn

    def _should_close(self) -> bool:
        """Whether to close connection after use."""
        return self._external_conn is None

    # --- Seeding ---

    def add(self, *variants: Node, default_langcode: str | None = None) -> NodeRevision:
        """
        Store a new revision made of the given language variants.

        Creates the node row on first use. All variants must share nid and type.
        """
        if not variants:
            raise ValueError("At least one variant is required")
        first = variants[0]
        if any(v.nid != first.nid or v.type != first.type for v in variants):
            raise ValueError("Variants of one revision must share nid and type")

        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO nodes (nid, type, default_langcode) VALUES (?, ?, ?)
                ON CONFLICT(nid) DO UPDATE SET type=excluded.type
                """,
                (first.nid, first.type, default_langcode or first.langcode),
            )
            vid = self._insert_revision(conn, first)
            for variant in variants:
                self._upsert_variant(conn, variant, vid)
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            if self._should_close():
                conn.close()

        revision = self.load_revision(vid)
        assert revision is not None
        return revision

    # --- NodeStorePort ---

    def execute(self, query: NodeQuery) -> list[int]:
        clauses: list[str] = []
        params: list[Any] = []
        for condition in query.conditions:
            sql, values = _condition_sql(condition)
            clauses.append(sql)
            params.extend(values)
        if query.latest_revision_only:
            clauses.append("f.vid = (SELECT MAX(r2.vid) FROM node_revisions r2 WHERE r2.nid = f.nid)")

        sql = "SELECT f.nid FROM node_field_revisions f JOIN nodes n ON n.nid = f.nid"
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        if query.sorts:
            sql += " ORDER BY " + ", ".join(
                f"{_column(name)} {direction}" for name, direction in query.sorts
            )

        conn = self._get_conn()
        try:
            rows = conn.execute(sql, params).fetchall()
        finally:
            if self._should_close():
                conn.close()

        # One row per variant; keep each node at its first position.
        return list(dict.fromkeys(row["nid"] for row in rows))

    def load(self, nid: int) -> NodeRevision | None:
        vids = self.revision_ids(nid)
        return self.load_revision(vids[-1]) if vids else None

    def revision_ids(self, nid: int) -> list[int]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT vid FROM node_revisions WHERE nid = ? ORDER BY vid ASC", (nid,)
            ).fetchall()
            return [row["vid"] for row in rows]
        finally:
            if self._should_close():
                conn.close()

    def load_revision(self, vid: int) -> NodeRevision | None:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                _VARIANT_SELECT + " WHERE f.vid = ? ORDER BY f.langcode ASC", (vid,)
            ).fetchall()
        finally:
            if self._should_close():
                conn.close()

        if not rows:
            return None
        first = rows[0]
        return NodeRevision(
            nid=first["nid"],
            vid=vid,
            type=first["type"],
            default_langcode=first["default_langcode"],
            translations={row["langcode"]: _map_row(row) for row in rows},
        )

    def save(self, node: Node) -> Node:
        """
        Save one language variant.

        With new_revision set, a new revision is created holding a copy of the
        other variants of the latest revision. Otherwise the variant is
        updated in place in the latest revision.
        """
        vids = self.revision_ids(node.nid)
        if not vids:
            revision = self.add(node.model_copy(update={"new_revision": False}))
            return revision.get_translation(node.langcode)

        conn = self._get_conn()
        try:
            if node.new_revision:
                vid = self._insert_revision(conn, node)
                conn.execute(
                    """
                    INSERT INTO node_field_revisions (
                        vid, nid, langcode, title, status, publish_on,
                        unpublish_on, created, changed, moderation_state
                    )
                    SELECT ?, nid, langcode, title, status, publish_on,
                        unpublish_on, created, changed, moderation_state
                    FROM node_field_revisions WHERE vid = ? AND langcode != ?
                    """,
                    (vid, vids[-1], node.langcode),
                )
            else:
                vid = vids[-1]
                if node.revision_log is not None:
                    conn.execute(
                        """
                        UPDATE node_revisions SET revision_log = ?, revision_timestamp = ?
                        WHERE vid = ?
                        """,
                        (node.revision_log, node.revision_timestamp, vid),
                    )
            self._upsert_variant(conn, node, vid)
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            if self._should_close():
                conn.close()

        return node.model_copy(update={"vid": vid, "new_revision": False})

    # --- Helpers ---

    def get(self, nid: int, langcode: str = "en") -> Node:
        """Latest revision of one variant."""
        revision = self.load(nid)
        if revision is None:
            raise KeyError(f"Node {nid} not found")
        return revision.get_translation(langcode)

    def _insert_revision(self, conn: sqlite3.Connection, node: Node) -> int:
        cursor = conn.execute(
            "INSERT INTO node_revisions (nid, revision_log, revision_timestamp) VALUES (?, ?, ?)",
            (node.nid, node.revision_log, node.revision_timestamp),
        )
        vid = cursor.lastrowid
        assert vid is not None
        return vid

    def _upsert_variant(self, conn: sqlite3.Connection, node: Node, vid: int) -> None:
        conn.execute(
            """
            INSERT INTO node_field_revisions (
                vid, nid, langcode, title, status, publish_on,
                unpublish_on, created, changed, moderation_state
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(vid, langcode) DO UPDATE SET
                title=excluded.title,
                status=excluded.status,
                publish_on=excluded.publish_on,
                unpublish_on=excluded.unpublish_on,
                created=excluded.created,
                changed=excluded.changed,
                moderation_state=excluded.moderation_state
            """,
            (
                vid,
                node.nid,
                node.langcode,
                node.title,
                int(node.status),
                node.publish_on,
                node.unpublish_on,
                node.created,
                node.changed,
                node.moderation_state,
            ),
        )
