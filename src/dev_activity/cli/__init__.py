"""Command line interface for dev-activity."""
