"""Domain layer: normalization, resolution and seeding of reference data."""
