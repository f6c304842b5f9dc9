"""Full-text search over the Bible corpus."""

__version__ = "1.0.0"
