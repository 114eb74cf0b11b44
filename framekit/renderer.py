"""Frame rendering through a pluggable drawing backend."""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, Iterable, List, Optional, Protocol

from framekit.animation.composer import DrawItem, FrameComposer
from framekit.schemas import CompiledTimeline
from framekit.tools.text_metrics import TextMeasurer

logger = logging.getLogger(__name__)


class DrawingBackend(Protocol):
    def begin_frame(self, frame: int, width: int, height: int) -> None:
        ...

    def draw(self, item: DrawItem) -> None:
        ...

    def end_frame(self) -> Any:
        ...


class RecordingBackend:
    """Backend that keeps the draw list of every rendered frame."""

    def __init__(self) -> None:
        self.frames: Dict[int, List[DrawItem]] = {}
        self._current: Optional[int] = None

    def begin_frame(self, frame: int, width: int, height: int) -> None:
        self._current = frame
        self.frames[frame] = []

    def draw(self, item: DrawItem) -> None:
        if self._current is None:
            raise RuntimeError("draw() called outside of a frame")
        self.frames[self._current].append(item)

    def end_frame(self) -> List[DrawItem]:
        items = self.frames[self._current]
        self._current = None
        return items


class Renderer:
    def __init__(
        self,
        timeline: CompiledTimeline,
        backend: Optional[DrawingBackend] = None,
        measurer: Optional[TextMeasurer] = None,
    ):
        self.timeline = timeline
        self.backend = backend or RecordingBackend()
        self.composer = FrameComposer(timeline, measurer)

    def sample_frame(self, frame: int) -> List[DrawItem]:
        return self.composer.compose(frame)

    def render_frame(self, frame: int) -> Any:
        project = self.timeline.project
        self.backend.begin_frame(frame, project.width, project.height)
        for item in self.sample_frame(frame):
            self.backend.draw(item)
        return self.backend.end_frame()

    def render(self, frames: Optional[Iterable[int]] = None) -> List[Any]:
        """Render frames in order through the backend."""
        if frames is None:
            frames = range(self.timeline.project.frames)
        return [self.render_frame(frame) for frame in frames]

    def sample_frames(self, frames: Iterable[int], workers: int = 4) -> Dict[int, List[DrawItem]]:
        """Sample many frames concurrently; the timeline is only read."""
        frames = list(frames)
        results: Dict[int, List[DrawItem]] = {}
        with ThreadPoolExecutor(max_workers=max(1, workers)) as pool:
            futures = {pool.submit(self.sample_frame, frame): frame for frame in frames}
            for future in as_completed(futures):
                results[futures[future]] = future.result()
        logger.debug("Sampled %d frames with %d workers", len(frames), workers)
        return {frame: results[frame] for frame in frames}
