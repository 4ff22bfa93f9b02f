"""nullcode - completion post-processing and context assembly for editor code suggestions."""

__version__ = "0.1.0"
