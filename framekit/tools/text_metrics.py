"""Text measurement used for anchors, clip defaults and percentage clips."""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional, Protocol, Tuple

from PIL import ImageFont

from framekit.utils.config import settings

logger = logging.getLogger(__name__)


class TextMeasurer(Protocol):
    def measure(self, content: str, size: float, font: Optional[str] = None, bold: bool = False) -> Tuple[float, float]:
        """Return ``(width, height)`` in pixels."""
        ...


@lru_cache(maxsize=64)
def _load_font(font: str, size: float, bold: bool):
    candidates = [f"{font}-Bold", font] if bold else [font]
    for name in candidates:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    logger.debug("Font '%s' not found, using Pillow default font", font)
    return ImageFont.load_default(size=size)


class PillowTextMeasurer:
    """Measures text with Pillow fonts.

    Width comes from the font's advance length; height is
    ``size * settings.text_line_height``.
    """

    def measure(self, content: str, size: float, font: Optional[str] = None, bold: bool = False) -> Tuple[float, float]:
        loaded = _load_font(font or settings.default_font, float(size), bold)
        width = float(loaded.getlength(content or ""))
        return width, size * settings.text_line_height


_default_measurer: Optional[TextMeasurer] = None


def default_measurer() -> TextMeasurer:
    global _default_measurer
    if _default_measurer is None:
        _default_measurer = PillowTextMeasurer()
    return _default_measurer
