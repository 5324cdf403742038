"""DocNav: fuzzy search and cross-reference linking for a fixed document corpus."""

__version__ = "0.1.0"
