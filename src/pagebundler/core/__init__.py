"""Core library for PageBundler (resolution, pipeline, build coordination)."""
