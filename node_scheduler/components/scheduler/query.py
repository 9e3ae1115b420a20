"""
Node query builder.

Describes a node selection (conditions, latest-revision restriction, sort
keys) independently of the store that executes it.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

Operator = Literal["=", "<", "<=", ">", ">=", "IN", "EXISTS"]

OPERATORS: tuple[str, ...] = ("=", "<", "<=", ">", ">=", "IN", "EXISTS")

NODE_FIELDS: tuple[str, ...] = (
    "nid",
    "vid",
    "type",
    "langcode",
    "title",
    "status",
    "publish_on",
    "unpublish_on",
    "created",
    "changed",
)


@dataclass(frozen=True)
class Condition:
    field: str
    value: Any
    operator: Operator = "="

    def matches(self, actual: Any) -> bool:
        """Evaluate the condition against a field value."""
        if self.operator == "EXISTS":
            return actual is not None
        if actual is None:
            return False
        if self.operator == "IN":
            return actual in self.value
        if self.operator == "=":
            return bool(actual == self.value)
        if self.operator == "<":
            return bool(actual < self.value)
        if self.operator == "<=":
            return bool(actual <= self.value)
        if self.operator == ">":
            return bool(actual > self.value)
        return bool(actual >= self.value)


@dataclass
class NodeQuery:
    """
    Chainable node query.

    Usage::

        query = (
            NodeQuery()
            .exists("publish_on")
            .condition("publish_on", now, "<=")
            .condition("type", ["article"], "IN")
            .latest_revision()
            .sort("publish_on")
            .sort("nid")
        )
    """

    conditions: list[Condition] = field(default_factory=list)
    sorts: list[tuple[str, str]] = field(default_factory=list)
    latest_revision_only: bool = False

    def condition(self, field_name: str, value: Any, operator: Operator = "=") -> NodeQuery:
        _check_field(field_name)
        if operator not in OPERATORS:
            raise ValueError(f"Unsupported operator: {operator}")
        if operator == "IN" and (isinstance(value, str) or not isinstance(value, Sequence)):
            raise ValueError("IN conditions need a list of values")
        self.conditions.append(Condition(field_name, value, operator))
        return self

    def exists(self, field_name: str) -> NodeQuery:
        _check_field(field_name)
        self.conditions.append(Condition(field_name, None, "EXISTS"))
        return self

    def latest_revision(self) -> NodeQuery:
        self.latest_revision_only = True
        return self

    def sort(self, field_name: str, direction: str = "ASC") -> NodeQuery:
        _check_field(field_name)
        direction = direction.upper()
        if direction not in ("ASC", "DESC"):
            raise ValueError(f"Unsupported sort direction: {direction}")
        self.sorts.append((field_name, direction))
        return self


def _check_field(field_name: str) -> None:
    if field_name not in NODE_FIELDS:
        raise ValueError(f"Unknown node field: {field_name}")
