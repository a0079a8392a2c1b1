"""HTTP evaluation service."""
