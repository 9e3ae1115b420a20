from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

# --- Enums / Literals ---
ModerationState = Literal["draft", "published", "archived"]


class ScheduleAction(str, Enum):
    PUBLISH = "publish"
    UNPUBLISH = "unpublish"

    @property
    def date_field(self) -> str:
        """Name of the node field holding the scheduled time."""
        return f"{self.value}_on"

    @property
    def past_tense(self) -> str:
        return f"{self.value}ed"

# --- Nodes ---


class Node(BaseModel):
    """
    One language variant of one revision of a content node.

    Timestamps are epoch seconds. ``publish_on`` and ``unpublish_on`` are
    None when nothing is scheduled.
    """

    nid: int
    vid: int = 0
    type: str
    langcode: str = "en"
    title: str
    status: bool = False

    publish_on: int | None = None
    unpublish_on: int | None = None

    created: int = 0
    changed: int = 0

    new_revision: bool = False
    revision_log: str | None = None
    revision_timestamp: int | None = None

    moderation_state: ModerationState | None = None


class NodeRevision(BaseModel):
    """A revision of a node with all of its language variants."""

    nid: int
    vid: int
    type: str
    default_langcode: str = "en"
    translations: dict[str, Node] = Field(default_factory=dict)

    def translation_languages(self) -> list[str]:
        """Langcodes of this revision, default language first."""
        others = [code for code in self.translations if code != self.default_langcode]
        if self.default_langcode in self.translations:
            return [self.default_langcode, *others]
        return others

    def get_translation(self, langcode: str) -> Node:
        try:
            return self.translations[langcode]
        except KeyError:
            raise KeyError(f"Node {self.nid} has no '{langcode}' translation") from None

    @property
    def title(self) -> str:
        """Title of the default-language variant."""
        langcodes = self.translation_languages()
        if not langcodes:
            return ""
        return self.translations[langcodes[0]].title
