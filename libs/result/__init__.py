"""Result type used by use cases to report success or a typed error."""

from .result import Error, Result, Return

__all__ = ["Error", "Result", "Return"]
