"""Tessie REST endpoint modules (internal)."""
