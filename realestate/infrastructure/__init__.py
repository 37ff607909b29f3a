"""Infrastructure adapters: cache, persistence stores, security."""
