"""Loading and caching of external definitions.

Component/scene files are cached by absolute path, effect definitions by
name. Both caches are plain objects so tests can build their own or clear
the process-wide ones between runs.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional

from pydantic import ValidationError

from framekit.schemas import EffectDefinition
from framekit.utils.config import settings
from framekit.utils.file_utils import read_json_file

logger = logging.getLogger(__name__)

BUNDLED_EFFECTS_DIR = Path(__file__).resolve().parent.parent / "presets"

JsonLoader = Callable[[Path], Dict[str, Any]]


class DefinitionLoadError(ValueError):
    pass


class EffectNotFoundError(ValueError):
    pass


def _read_json(path: Path) -> Dict[str, Any]:
    return read_json_file(str(path))


class DefinitionStore:
    """Component and scene definitions keyed by resolved file path."""

    def __init__(self, loader: Optional[JsonLoader] = None):
        self._loader = loader if loader is not None else _read_json
        self._cache: Dict[Path, Dict[str, Any]] = {}

    def load(self, path: Path) -> Dict[str, Any]:
        """Return the parsed JSON at ``path``.

        The cached payload is shared; callers must treat it as read-only.
        """
        key = Path(path).resolve()
        if key in self._cache:
            return self._cache[key]
        try:
            payload = self._loader(key)
        except FileNotFoundError as exc:
            raise DefinitionLoadError(f"Definition file not found: {key}") from exc
        except ValueError as exc:
            raise DefinitionLoadError(f"Invalid definition file {key}: {exc}") from exc
        logger.debug("Loaded definition %s", key)
        self._cache[key] = payload
        return payload

    def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)


class EffectLibrary:
    """Named effect definitions.

    Lookup order: in-memory registrations, then ``<dir>/<name>.json`` for
    each search directory in order.
    """

    def __init__(self, search_dirs: Optional[Iterable[Path]] = None):
        if search_dirs is None:
            search_dirs = _default_search_dirs()
        self.search_dirs: List[Path] = [Path(d) for d in search_dirs]
        self._cache: Dict[str, EffectDefinition] = {}

    def register(self, name: str, definition: Any) -> EffectDefinition:
        effect = (
            definition
            if isinstance(definition, EffectDefinition)
            else EffectDefinition.model_validate(definition)
        )
        self._cache[name] = effect
        return effect

    def get(self, name: str) -> EffectDefinition:
        if name in self._cache:
            return self._cache[name]
        for directory in self.search_dirs:
            path = directory / f"{name}.json"
            if not path.is_file():
                continue
            try:
                effect = EffectDefinition.model_validate(read_json_file(str(path)))
            except (ValueError, ValidationError) as exc:
                raise DefinitionLoadError(f"Invalid effect definition '{name}' in {path}: {exc}") from exc
            logger.debug("Loaded effect '%s' from %s", name, path)
            self._cache[name] = effect
            return effect
        available = ", ".join(self.names()) or "none"
        raise EffectNotFoundError(
            f"Effect '{name}' not found in effects library. Available effects: {available}"
        )

    def names(self) -> List[str]:
        found = set(self._cache)
        for directory in self.search_dirs:
            if directory.is_dir():
                found.update(p.stem for p in directory.glob("*.json"))
        return sorted(found)

    def clear(self) -> None:
        self._cache.clear()


def _default_search_dirs() -> List[Path]:
    dirs: List[Path] = []
    if settings.effects_dir:
        dirs.append(Path(settings.effects_dir))
    dirs.append(BUNDLED_EFFECTS_DIR)
    return dirs


_default_store: Optional[DefinitionStore] = None
_default_library: Optional[EffectLibrary] = None


def default_store() -> DefinitionStore:
    global _default_store
    if _default_store is None:
        _default_store = DefinitionStore()
    return _default_store


def default_library() -> EffectLibrary:
    global _default_library
    if _default_library is None:
        _default_library = EffectLibrary()
    return _default_library


def clear_caches() -> None:
    """Drop every cached component, scene and effect definition."""
    if _default_store is not None:
        _default_store.clear()
    if _default_library is not None:
        _default_library.clear()
