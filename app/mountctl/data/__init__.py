"""Bundled data files for mountctl."""
