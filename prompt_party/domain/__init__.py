"""Domain layer for the party game."""
