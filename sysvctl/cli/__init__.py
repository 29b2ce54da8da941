"""CLI module for sysvctl."""
