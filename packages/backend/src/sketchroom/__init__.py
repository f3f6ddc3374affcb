"""Sketchroom — collaboration backend for shared drawing rooms.

Authenticates users, gates access to rooms, and stores versioned
diagram documents scoped to those rooms.
"""

__version__ = "0.1.0"
