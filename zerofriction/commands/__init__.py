"""zf CLI commands."""
