"""Serialization of notebooks and check reports."""
