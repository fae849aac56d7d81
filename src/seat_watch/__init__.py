"""Course section seat watcher for Banner 9 registration."""

__version__ = "0.1.0"
