"""Geometry, headings, and playback."""
