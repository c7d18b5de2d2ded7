"""Domain layer: entities and services for collection lifecycle."""
