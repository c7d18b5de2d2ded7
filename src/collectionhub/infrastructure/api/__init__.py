"""HTTP adapter for collection operations."""
