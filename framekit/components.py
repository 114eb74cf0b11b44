"""Component and scene expansion.

``component`` and ``scene`` references are replaced by ``group`` nodes that
hold the referenced file's objects. Component parameters are substituted
into the definition first; every descendant id is prefixed with the
reference's own id so repeated instances stay distinct.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from framekit.schemas import (
    AnimationEntry,
    BaseObject,
    ComponentDefinition,
    ComponentObject,
    EffectAnimation,
    GroupObject,
    ReferenceObject,
    SceneFile,
    SceneObject,
)
from framekit.timing import parse_time
from framekit.tokens import substitute_params
from framekit.tools.definition_store import DefinitionStore, default_store

logger = logging.getLogger(__name__)

Chain = Tuple[Path, ...]


class ComponentError(ValueError):
    pass


class CircularReferenceError(ComponentError):
    pass


def prefix_ids(objects: Sequence[BaseObject], prefix: str) -> List[BaseObject]:
    """Copy ``objects`` with every id (at any depth) prefixed by ``prefix``."""
    prefixed: List[BaseObject] = []
    for obj in objects:
        update: Dict[str, Any] = {}
        if obj.id is not None:
            update["id"] = f"{prefix}{obj.id}"
        if isinstance(obj, GroupObject):
            update["children"] = prefix_ids(obj.children, prefix)
        prefixed.append(obj.model_copy(update=update))
    return prefixed


def offset_animations(
    animations: Sequence[AnimationEntry], offset: int, prefix: str, fps: float
) -> List[AnimationEntry]:
    """Shift definition animations to absolute frames and namespace their targets."""
    shifted: List[AnimationEntry] = []
    for anim in animations:
        if isinstance(anim, EffectAnimation):
            shifted.append(
                anim.model_copy(
                    update={"target": prefix + anim.target, "start": offset + parse_time(anim.start, fps)}
                )
            )
        else:
            keyframes = [
                kf.model_copy(update={"start": offset + parse_time(kf.start, fps)}) for kf in anim.keyframes
            ]
            shifted.append(anim.model_copy(update={"target": prefix + anim.target, "keyframes": keyframes}))
    return shifted


def component_params(payload: Dict[str, Any], ref: ComponentObject) -> Dict[str, Any]:
    params: Dict[str, Any] = {}
    for name, declared in (payload.get("parameters") or {}).items():
        if isinstance(declared, dict) and "default" in declared:
            params[name] = declared["default"]
    params.update(ref.params or {})
    return params


def _chain_text(chain: Chain) -> str:
    return " -> ".join(str(p) for p in chain)


def _load_definition(
    ref: ReferenceObject, path: Path, store: DefinitionStore
) -> Union[ComponentDefinition, SceneFile]:
    payload = store.load(path)
    try:
        if isinstance(ref, ComponentObject):
            substituted = dict(payload)
            params = component_params(payload, ref)
            for key in ("objects", "animations"):
                if key in payload:
                    substituted[key] = substitute_params(payload[key], params)
            return ComponentDefinition.model_validate(substituted)
        return SceneFile.model_validate(payload)
    except ValidationError as exc:
        raise ComponentError(f"Invalid {ref.type} definition {path}: {exc}") from exc


def expand_reference(
    ref: ReferenceObject,
    base_dir: Path,
    fps: float,
    store: Optional[DefinitionStore] = None,
    offset: int = 0,
    chain: Chain = (),
) -> GroupObject:
    """Expand one component/scene reference into a group.

    ``offset`` is the absolute start frame inherited from enclosing groups;
    ``chain`` holds the definition files currently being expanded, outermost
    first.
    """
    store = store if store is not None else default_store()

    if isinstance(ref, ComponentObject) and not ref.id:
        raise ComponentError("Component objects must have an id for namespacing")
    if not ref.source:
        raise ComponentError(f"{ref.type.capitalize()} '{ref.id or 'unknown'}' must have a 'source' property.")

    path = (Path(base_dir) / ref.source).resolve()
    if path in chain:
        raise CircularReferenceError(f"Circular reference detected: {_chain_text(chain + (path,))}")

    definition = _load_definition(ref, path, store)
    own_offset = offset + parse_time(ref.start if ref.start is not None else 0, fps)
    prefix = f"{ref.id}." if ref.id else ""

    children = prefix_ids(definition.objects, prefix) if prefix else list(definition.objects)
    children = expand_objects(children, path.parent, fps, store, own_offset, chain + (path,))

    duration = ref.duration
    if duration is None and isinstance(definition, SceneFile):
        duration = definition.duration

    fields = {name: getattr(ref, name) for name in BaseObject.model_fields}
    group = GroupObject(
        **fields,
        children=children,
        start=ref.start,
        duration=duration,
        transition=ref.transition,
        expanded_from=str(path),
        resolved_animations=offset_animations(definition.animations, own_offset, prefix, fps),
    )
    logger.debug(
        "Expanded %s '%s' from %s (%d children, start frame %d)",
        ref.type,
        ref.id,
        path,
        len(children),
        own_offset,
    )
    return group


def expand_objects(
    objects: Sequence[BaseObject],
    base_dir: Path,
    fps: float,
    store: Optional[DefinitionStore] = None,
    offset: int = 0,
    chain: Chain = (),
) -> List[BaseObject]:
    """Replace every component/scene reference in the tree by a group."""
    store = store if store is not None else default_store()
    expanded: List[BaseObject] = []
    for obj in objects:
        if isinstance(obj, (ComponentObject, SceneObject)):
            expanded.append(expand_reference(obj, base_dir, fps, store, offset, chain))
        elif isinstance(obj, GroupObject):
            group_offset = offset + parse_time(obj.start if obj.start is not None else 0, fps)
            children = expand_objects(obj.children, base_dir, fps, store, group_offset, chain)
            expanded.append(obj.model_copy(update={"children": children}))
        else:
            expanded.append(obj)
    return expanded
