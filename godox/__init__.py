"""Extract a serializable documentation model from Go source trees."""

__version__ = "0.1.0"
