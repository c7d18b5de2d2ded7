"""CollectionHub - curated collections of projects.

Owns the lifecycle of collections: creation, retrieval, partial edits,
membership changes, moderation status, icons and deletion.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
