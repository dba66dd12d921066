"""Bundled YAML adaptation presets (read via importlib.resources)."""
