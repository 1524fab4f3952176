"""Line segmentation and terminal rendering."""
from .render import LineRenderer, resolve_color_system, slot_style
from .segmenter import Span, segment, span_text

__all__ = ["LineRenderer", "Span", "resolve_color_system", "segment", "slot_style", "span_text"]
