"""JSON translation tables, a size-rotating background file logger and guarded ZIP extraction."""

__version__ = "0.1.0"
__all__ = ["locale", "logger", "unzip"]