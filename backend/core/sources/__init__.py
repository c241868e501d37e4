from .source_registry import SourceRegistry

__all__ = [
    "SourceRegistry",
]
