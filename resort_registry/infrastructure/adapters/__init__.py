"""Infrastructure adapters for production backends."""
