"""Build, inspect and edit in-memory PDF document object graphs."""

__version__ = "0.1.0"