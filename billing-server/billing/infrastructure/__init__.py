"""Infrastructure adapters (database, payment provider)."""
