"""
In-memory node store.

Keeps every revision of every node with its language variants. Loads return
deep copies, so changes only reach the store through save().
"""

from __future__ import annotations

from typing import Any

from node_scheduler.components.scheduler.query import NodeQuery
from node_scheduler.domain.entities import Node, NodeRevision


class InMemoryNodeStore:
    def __init__(self) -> None:
        self._revisions: dict[int, NodeRevision] = {}
        self._node_revisions: dict[int, list[int]] = {}
        self._next_vid = 1
        self.save_count = 0

    # --- Fixtures / seeding ---

    def add(self, *variants: Node, default_langcode: str | None = None) -> NodeRevision:
        """
        Add a revision made of the given language variants.

        The variants must share a nid and type. A nid seen before gets a new
        revision on top of its existing ones.
        """
        if not variants:
            raise ValueError("At least one variant is required")
        nid = variants[0].nid
        node_type = variants[0].type
        if any(v.nid != nid or v.type != node_type for v in variants):
            raise ValueError("Variants of one revision must share nid and type")

        vid = self._allocate_vid()
        revision = NodeRevision(
            nid=nid,
            vid=vid,
            type=node_type,
            default_langcode=default_langcode or variants[0].langcode,
            translations={v.langcode: v.model_copy(update={"vid": vid}) for v in variants},
        )
        self._revisions[vid] = revision
        self._node_revisions.setdefault(nid, []).append(vid)
        return revision.model_copy(deep=True)

    # --- NodeStorePort ---

    def execute(self, query: NodeQuery) -> list[int]:
        rows: list[Node] = []
        for nid, vids in self._node_revisions.items():
            candidates = [vids[-1]] if query.latest_revision_only else vids
            for vid in candidates:
                for node in self._revisions[vid].translations.values():
                    if all(c.matches(getattr(node, c.field)) for c in query.conditions):
                        rows.append(node)

        for field_name, direction in reversed(query.sorts):
            rows.sort(
                key=lambda n, f=field_name: _sort_key(getattr(n, f)),
                reverse=direction == "DESC",
            )

        return list(dict.fromkeys(node.nid for node in rows))

    def load(self, nid: int) -> NodeRevision | None:
        vids = self._node_revisions.get(nid)
        if not vids:
            return None
        return self._revisions[vids[-1]].model_copy(deep=True)

    def revision_ids(self, nid: int) -> list[int]:
        return list(self._node_revisions.get(nid, []))

    def load_revision(self, vid: int) -> NodeRevision | None:
        revision = self._revisions.get(vid)
        return revision.model_copy(deep=True) if revision else None

    def save(self, node: Node) -> Node:
        self.save_count += 1
        vids = self._node_revisions.get(node.nid)
        if not vids:
            revision = self.add(node.model_copy(update={"new_revision": False}))
            return revision.get_translation(node.langcode)

        if node.new_revision:
            base = self._revisions[vids[-1]]
            vid = self._allocate_vid()
            translations = {
                code: variant.model_copy(update={"vid": vid}, deep=True)
                for code, variant in base.translations.items()
            }
            saved = node.model_copy(update={"vid": vid, "new_revision": False}, deep=True)
            translations[node.langcode] = saved
            self._revisions[vid] = base.model_copy(update={"vid": vid, "translations": translations})
            vids.append(vid)
        else:
            vid = vids[-1]
            saved = node.model_copy(update={"vid": vid}, deep=True)
            self._revisions[vid].translations[node.langcode] = saved

        return saved.model_copy(deep=True)

    # --- Helpers ---

    def get(self, nid: int, langcode: str = "en") -> Node:
        """Latest revision of one variant."""
        revision = self.load(nid)
        if revision is None:
            raise KeyError(f"Node {nid} not found")
        return revision.get_translation(langcode)

    def _allocate_vid(self) -> int:
        vid = self._next_vid
        self._next_vid += 1
        return vid


def _sort_key(value: Any) -> tuple[bool, Any]:
    # NULLs sort first, as in SQL ascending order.
    return (value is not None, value)
