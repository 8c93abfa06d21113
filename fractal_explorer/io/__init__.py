"""Configuration files and environment overrides."""
