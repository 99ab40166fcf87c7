"""TreeQLite CLI commands."""
