"""Configuration — geocmd.toml discovery, settings, and logging setup."""
