"""typerush: a timed terminal typing challenge."""

__version__ = "0.1.0"
