"""Cue sheet import pipeline for NLE project files."""
