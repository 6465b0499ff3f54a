"""Directory listing and static file server for a single video folder."""

__version__ = "0.1.0"
