"""Infrastructure layer: persistence, asset storage and HTTP adapter."""
