"""citewiki: convert note links between wiki and citation syntax."""

__version__ = "0.3.0"
