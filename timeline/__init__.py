"""Timeline feed service."""
