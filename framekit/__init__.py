"""framekit: declarative animation timelines compiled to frame-absolute tracks."""

__version__ = "0.1.0"
