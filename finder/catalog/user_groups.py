"""User group store.

User groups come as a three-level tree. Levels 2 and 3 are selectable in
the ``user`` facet; they are flattened here into searchable items.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from finder.domain.exceptions import DataLoadError
from finder.infrastructure.json_source import JsonFileSource

logger = structlog.get_logger()


class UserGroupNode(BaseModel):
    """One node of the raw user group tree.

    Malformed ``aliases`` and ``children`` values read as empty lists.
    """

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str = ""
    label: str = ""
    aliases: list[str] = []
    children: list[Any] = []

    @field_validator("id", "label", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("aliases", mode="before")
    @classmethod
    def _aliases_list(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return []
        return [str(a) for a in value if isinstance(a, (str, int, float))]

    @field_validator("children", mode="before")
    @classmethod
    def _children_list(cls, value: Any) -> Any:
        return value if isinstance(value, list) else []


@dataclass
class UserGroup:
    """A selectable user group.

    Attributes:
        id: Group identifier, used as the ``user`` facet token.
        label: Display label.
        level: Depth in the tree (2 or 3).
        aliases: Alternative names matched by search.
        parent_label: Label of the enclosing group.
        grandparent_label: Label of the level 1 group, level 3 only.
    """

    id: str
    label: str
    level: int
    aliases: list[str] = field(default_factory=list)
    parent_label: str | None = None
    grandparent_label: str | None = None

    @property
    def search_text(self) -> str:
        """Lower-cased label and aliases joined by spaces."""
        return " ".join([self.label, *self.aliases]).lower()


class UserGroupStore:
    """Store for the nested user group tree.

    Example usage:
        store = UserGroupStore(JsonFileSource("data/nested_all_user_groups.json"))
        matches = store.search("teach")
    """

    def __init__(self, source: JsonFileSource) -> None:
        """Initialize store.

        Args:
            source: JSON source for the user groups file.
        """
        self.source = source

    @classmethod
    def from_path(cls, path: str | Path, cache_enabled: bool = False) -> "UserGroupStore":
        """Create a store reading from a file path."""
        return cls(JsonFileSource(path, cache_enabled=cache_enabled))
    def load(self) -> list[UserGroup]:
        """Load and flatten the tree.

        Nodes that are not objects, or whose ``id`` or ``label`` is not a
        string or number, are skipped along with their subtree. Level 2 and
        3 nodes without an ID are skipped as well.

        Returns:
            Level 2 groups each followed by their level 3 children.

        Raises:
            DataLoadError: If the file is unreadable or not an array.
        """
        raw = self.source.read()
        if not isinstance(raw, list):
            raise DataLoadError(self.source.path, "expected a JSON array of groups")

        items: list[UserGroup] = []
        for level1 in _nodes(raw):
            for level2 in _nodes(level1.children):
                if not level2.id:
                    continue
                items.append(_to_group(level2, level=2, parent=level1))
                for level3 in _nodes(level2.children):
                    if level3.id:
                        items.append(
                            _to_group(level3, level=3, parent=level2, grandparent=level1)
                        )
        return items

    def get(self, group_id: str) -> UserGroup | None:
        """Get a group by ID.

        Args:
            group_id: Group ID.

        Returns:
            Group if found, None otherwise.
        """
        return next((g for g in self.load() if g.id == group_id), None)

    def label_for(self, group_id: str) -> str:
        """Get a group's label, or the ID itself for unknown groups."""
        group = self.get(group_id)
        return group.label if group else group_id

    def labels(self) -> dict[str, str]:
        """Map every group ID to its label."""
        return {g.id: g.label for g in self.load()}

    def search(self, query: str, limit: int = 20) -> list[UserGroup]:
        """Search groups by label or alias (case-insensitive substring).

        Args:
            query: Search query.
            limit: Maximum results.

        Returns:
            Matching groups in tree order.
        """
        query_lower = query.strip().lower()
        if not query_lower:
            return []
        return [g for g in self.load() if query_lower in g.search_text][:limit]


def _nodes(values: list[Any]) -> list[UserGroupNode]:
    nodes = []
    for index, value in enumerate(values):
        try:
            nodes.append(UserGroupNode.model_validate(value))
        except ValidationError as e:
            logger.warning(
                "Skipping invalid user group node",
                index=index,
                errors=e.error_count(),
            )
    return nodes


def _to_group(
    node: UserGroupNode,
    level: int,
    parent: UserGroupNode,
    grandparent: UserGroupNode | None = None,
) -> UserGroup:
    return UserGroup(
        id=node.id,
        label=node.label,
        level=level,
        aliases=list(node.aliases),
        parent_label=parent.label or None,
        grandparent_label=(grandparent.label or None) if grandparent else None,
    )
