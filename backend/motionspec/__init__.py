"""Motion spec service — turns extracted keyframe data into a described motion spec."""

__version__ = "2.0.0"
