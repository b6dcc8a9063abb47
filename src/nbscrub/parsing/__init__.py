"""Notebook reading and metadata key-path resolution."""
