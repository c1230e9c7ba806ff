"""Export a Ghost blog to a static, searchable site."""

__version__ = "0.1.0"
