"""Shared database, models and repositories for bdaybot services."""
