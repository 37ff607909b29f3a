"""Real-estate listings core: cached repositories for owners, properties, images, traces and users."""
