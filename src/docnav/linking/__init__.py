"""Cross-reference detection."""
