"""Format specific text extractors."""
