"""Dotted-path addressing over an object tree.

After flattening, every object id is its full path (``"intro.card.title"``).
Objects without an id are transparent: an id-less group's children live at
the group's own level of the path.
"""
from __future__ import annotations

from typing import Iterator, List, Optional, Sequence

from framekit.schemas import BaseObject, GroupObject


def join_path(scope: str, local_id: str) -> str:
    return f"{scope}.{local_id}" if scope else local_id


def level_members(objects: Sequence[BaseObject]) -> Iterator[BaseObject]:
    """Yield objects addressable at this path level."""
    for obj in objects:
        if obj.id is None and isinstance(obj, GroupObject):
            yield from level_members(obj.children)
        else:
            yield obj


def walk_objects(objects: Sequence[BaseObject]) -> Iterator[BaseObject]:
    """Depth-first walk in declaration order, groups before their children."""
    for obj in objects:
        yield obj
        if isinstance(obj, GroupObject):
            yield from walk_objects(obj.children)


def find_object(objects: Sequence[BaseObject], path: str, scope: str = "") -> Optional[BaseObject]:
    """Resolve ``path`` relative to ``scope`` one segment at a time.

    ``objects`` are the members of the ``scope`` level, carrying full ids.
    """
    current: Sequence[BaseObject] = objects
    prefix = scope
    node: Optional[BaseObject] = None
    for segment in path.split("."):
        wanted = join_path(prefix, segment)
        node = next((o for o in level_members(current) if o.id == wanted), None)
        if node is None:
            return None
        prefix = wanted
        current = node.children if isinstance(node, GroupObject) else []
    return node


def find_descendants(objects: Sequence[BaseObject], local_id: str) -> List[BaseObject]:
    """All descendants whose full id ends with ``.local_id`` (or equals it)."""
    suffix = "." + local_id
    return [
        obj
        for obj in walk_objects(objects)
        if obj.id is not None and (obj.id == local_id or obj.id.endswith(suffix))
    ]