"""depclean - find and remove stale project dependency folders."""

__version__ = "0.1.0"
