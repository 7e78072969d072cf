"""NeuroLens web front-end: upload files, get a friction detection and fix report."""

__version__ = "0.1.0"
