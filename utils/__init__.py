"""Image format conversion utilities."""
