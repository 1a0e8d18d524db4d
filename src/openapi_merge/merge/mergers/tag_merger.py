"""
Tag and tag group consolidation.

Tag groups travel in the ``x-tagGroups`` vendor extension as an ordered list
of ``{"name": ..., "tags": [...]}`` objects.
"""

from __future__ import annotations

import copy
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, Field

from ...document import TAG_GROUPS_EXTENSION, Document, Tag
from ..base import BaseComponentMerger


class TagGroup(BaseModel):
    """A named grouping of tag names."""

    name: str
    tags: List[str] = Field(default_factory=list)


class TagMerger(BaseComponentMerger):
    """Deduplicates tags by name; the first definition is kept."""

    def __init__(self):
        super().__init__()
        self._tags: Dict[str, Tag] = {}

    def add_tags(self, tags: Optional[Iterable[Tag]]) -> None:
        for tag in tags or ():
            if tag.name in self._tags:
                self.logger.debug(f"Dropping duplicate tag '{tag.name}'")
                continue
            self._tags[tag.name] = copy.deepcopy(tag)

    def get_tags(self) -> List[Tag]:
        return list(self._tags.values())


class TagGroupMerger(BaseComponentMerger):
    """
    Merges tag groups by name.

    The first appearance of a group fixes its position; tags of same-named
    groups are unioned in first-seen order.
    """

    def __init__(self):
        super().__init__()
        self._groups: Dict[str, List[str]] = {}

    def add_groups(self, groups: Iterable[TagGroup]) -> None:
        for group in groups:
            tags = self._groups.setdefault(group.name, [])
            for tag in group.tags:
                if tag not in tags:
                    tags.append(tag)

    def get_groups(self) -> List[TagGroup]:
        return [TagGroup(name=name, tags=list(tags)) for name, tags in self._groups.items()]


def read_tag_groups(document: Optional[Document]) -> List[TagGroup]:
    """
    Parse the tag group extension of ``document``.

    Malformed entries are skipped: a non-list extension, groups that are not
    objects or have no name, and tags that are not non-empty strings.
    """
    if document is None:
        return []

    raw_groups = (document.model_extra or {}).get(TAG_GROUPS_EXTENSION)
    if not isinstance(raw_groups, list):
        return []

    groups = []
    for raw_group in raw_groups:
        if not isinstance(raw_group, dict):
            continue

        name = raw_group.get("name")
        if not isinstance(name, str) or not name:
            continue

        raw_tags = raw_group.get("tags")
        tags = []
        if isinstance(raw_tags, list):
            tags = [tag for tag in raw_tags if isinstance(tag, str) and tag]

        groups.append(TagGroup(name=name, tags=tags))

    return groups


def write_tag_groups(document: Document, groups: List[TagGroup]) -> None:
    """
    Store ``groups`` in the tag group extension of ``document``.

    Nothing is written for an empty list.
    """
    if document is None:
        raise ValueError("Document cannot be None")
    if not groups:
        return

    setattr(document, TAG_GROUPS_EXTENSION, [group.model_dump() for group in groups])
