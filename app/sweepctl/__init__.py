"""sweepctl - Declarative purging of unmanaged users and groups."""

__version__ = "0.1.0"
