"""Juuret - family-network resolution for a transcribed Finnish family-register archive.

Locates family blocks in a raw corpus, links each family's members to the
records describing them as children and as parents elsewhere, and renders
citation text enriched from those linked records.
"""

__version__ = "0.1.0"

# Lazy imports to avoid circular dependencies
def __getattr__(name: str):
    if name == "models":
        from juuret import models
        return models
    if name == "corpus":
        from juuret import corpus
        return corpus
    if name == "resolution":
        from juuret import resolution
        return resolution
    if name == "citations":
        from juuret import citations
        return citations
    if name == "parsing":
        from juuret import parsing
        return parsing
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
