"""Adapter implementations for scriptbridge ports."""
