"""Prompt Party game progression engine."""
