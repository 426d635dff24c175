"""trackswitch - promote an embedded audio track to the default stream."""

__version__ = "0.1.0"
