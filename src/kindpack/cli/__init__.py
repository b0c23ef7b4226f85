"""Command-line interface for kindpack."""
