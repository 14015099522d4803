"""Filter and sort engine for photo portfolio galleries."""

__version__ = "0.1.0"
