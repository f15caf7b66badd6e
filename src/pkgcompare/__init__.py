"""npm package comparison and health scoring."""

__version__ = "0.1.0"
