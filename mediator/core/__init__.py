"""Core infrastructure shared across the package."""
