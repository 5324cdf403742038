"""Corpus index and search."""
