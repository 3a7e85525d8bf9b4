"""Packaged configuration files (default settings and vocabulary rules)."""
