"""Filename-based recognition of production music naming conventions."""
