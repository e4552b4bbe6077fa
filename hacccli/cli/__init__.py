"""CLI module for hacccli."""
