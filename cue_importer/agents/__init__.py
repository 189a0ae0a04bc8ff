"""LLM agents used by the cue importer."""
