"""Reconcile internal transaction exports against provider statements."""

__version__ = "0.1.0"
