"""Corpus loading."""
