"""GraceBot - chat bot backend."""

__version__ = "0.1.0"
