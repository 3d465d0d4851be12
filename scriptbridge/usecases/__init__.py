"""Use-case layer for orchestrating editor actions.

Each module coordinates domain objects and ports without performing transport
I/O directly, preserving the hexagonal boundaries.
"""
