import json
from pathlib import Path

import pytest

from framekit.tools.definition_store import BUNDLED_EFFECTS_DIR, DefinitionStore, EffectLibrary, clear_caches


class FakeMeasurer:
    """Half an em per character, line height 1.2."""

    def measure(self, content, size, font=None, bold=False):
        return len(content) * size * 0.5, size * 1.2


@pytest.fixture(autouse=True)
def _clear_definition_caches():
    clear_caches()
    yield
    clear_caches()


@pytest.fixture()
def measurer():
    return FakeMeasurer()


@pytest.fixture()
def store():
    return DefinitionStore()


@pytest.fixture()
def library():
    return EffectLibrary(search_dirs=[BUNDLED_EFFECTS_DIR])


@pytest.fixture()
def write_json(tmp_path: Path):
    def _write(name, payload):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write
