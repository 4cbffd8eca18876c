"""Top-level PageBundler commands."""
