"""Input validation and console rendering helpers."""
