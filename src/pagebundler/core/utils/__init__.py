"""Shared utilities for PageBundler core."""
