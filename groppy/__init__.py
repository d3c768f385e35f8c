"""groppy: update multiple git repositories in parallel."""

__version__ = "0.1.0"
