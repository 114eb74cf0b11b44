"""Compilation pipeline: raw animation document to a flat timeline."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from framekit.components import expand_objects
from framekit.flattener import flatten_timeline
from framekit.percentages import resolve_percentages
from framekit.schemas import AnimationFile, CompiledTimeline
from framekit.tools.animation_validator import validate_animations
from framekit.tools.definition_store import DefinitionStore, EffectLibrary
from framekit.tools.object_validator import validate_objects
from framekit.tools.text_metrics import TextMeasurer
from framekit.utils.file_utils import read_json_file

logger = logging.getLogger(__name__)


def compile_animation(
    data: Union[AnimationFile, Dict[str, Any]],
    base_dir: Union[str, Path] = ".",
    store: Optional[DefinitionStore] = None,
    library: Optional[EffectLibrary] = None,
    measurer: Optional[TextMeasurer] = None,
) -> CompiledTimeline:
    """Validate, expand, flatten and resolve an animation document.

    ``base_dir`` anchors relative component/scene ``source`` paths.
    """
    animation = data if isinstance(data, AnimationFile) else AnimationFile.model_validate(data)
    fps = animation.project.fps

    validate_objects(animation.objects)
    expanded = expand_objects(animation.objects, Path(base_dir), fps, store)
    validate_objects(expanded)

    objects, animations = flatten_timeline(
        expanded,
        animation.animations,
        fps,
        animation_speed=animation.animation_speed,
        library=library,
    )
    objects, animations = resolve_percentages(objects, animations, measurer)
    validate_animations(animations, objects)

    timeline = CompiledTimeline(project=animation.project, objects=objects, animations=animations)
    logger.info(
        "Compiled timeline: %d top-level objects, %d animations on %d targets",
        len(objects),
        len(animations),
        len(timeline.targets()),
    )
    return timeline


def compile_file(
    path: Union[str, Path],
    store: Optional[DefinitionStore] = None,
    library: Optional[EffectLibrary] = None,
    measurer: Optional[TextMeasurer] = None,
) -> CompiledTimeline:
    path = Path(path)
    payload = read_json_file(str(path))
    return compile_animation(payload, path.resolve().parent, store, library, measurer)
