"""Domain models, seed data and the lookup/aggregation logic."""
